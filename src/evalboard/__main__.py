from evalboard.cli import main

raise SystemExit(main())

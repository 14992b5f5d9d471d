from brewlog.cli.main import main

raise SystemExit(main())

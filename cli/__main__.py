from cli.dispatch import main

raise SystemExit(main())

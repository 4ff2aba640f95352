from boxgrid.cli import main

raise SystemExit(main())

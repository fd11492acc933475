from zip_repo.cli import main

raise SystemExit(main())

from collections_backend.server import main

raise SystemExit(main())

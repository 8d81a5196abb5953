from convex_auth_keys.main import main

raise SystemExit(main())

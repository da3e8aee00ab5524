from smack_client.launcher import main

raise SystemExit(main())

"""HTTP middleware: CORS policy, preflight handling, body limits."""

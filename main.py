"""
CLI entry point for originguard.

Usage:
    python main.py serve [--env production] [--host 0.0.0.0] [--port 5000]
    python main.py check-config [--env production]
    python main.py evaluate --origin http://localhost:5173 [--method OPTIONS]
"""

import argparse
import json
import sys

from originguard.config import Settings, get_settings, load_policy
from originguard.exceptions import MisconfigurationError
from originguard.middleware.preflight import PreflightDispatcher, PreflightState
from originguard.services.headers import cors_headers
from originguard.services.policy import evaluate


def _settings(args) -> Settings:
    if args.env:
        return Settings(app_env=args.env)
    return get_settings()


def cmd_serve(args):
    """Start the API server under uvicorn."""
    import uvicorn

    from originguard.main import create_app

    settings = _settings(args)
    app = create_app(settings)
    host = args.host or settings.api_host
    port = args.port or settings.api_port
    print(f"Starting originguard on {host}:{port} (env={settings.app_env})")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def cmd_check_config(args):
    """Validate the CORS policy and print it."""
    settings = _settings(args)
    try:
        policy = load_policy(settings)
    except MisconfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps({
        "environment": settings.app_env,
        "allowed_origins": list(policy.allowed_origins),
        "allowed_methods": list(policy.allowed_methods),
        "allowed_headers": list(policy.allowed_headers),
        "allow_credentials": policy.allow_credentials,
        "preflight_status": policy.preflight_status,
    }, indent=2))


def cmd_evaluate(args):
    """Show the headers a request with this origin would receive."""
    settings = _settings(args)
    try:
        policy = load_policy(settings)
    except MisconfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    decision = evaluate(args.origin, policy)
    initial = PreflightState.PENDING
    state = PreflightDispatcher(policy.preflight_status).route(args.method, initial)
    result = {
        "origin": args.origin,
        "method": args.method.upper(),
        "origin_allowed": decision.origin_allowed,
        "outcome": state.value,
        "transition": f"{initial.value} -> {state.value}",
        "headers": dict(cors_headers(decision)),
    }
    if state is PreflightState.TERMINATED:
        result["status"] = policy.preflight_status
    print(json.dumps(result, indent=2))


def main():
    parser = argparse.ArgumentParser(
        description="originguard - CORS policy layer"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve
    p_serve = subparsers.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--env", choices=["development", "production"], default=None)
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)

    # check-config
    p_check = subparsers.add_parser("check-config", help="Validate CORS configuration")
    p_check.add_argument("--env", choices=["development", "production"], default=None)

    # evaluate
    p_eval = subparsers.add_parser("evaluate", help="Show CORS headers for an origin")
    p_eval.add_argument("--origin", default=None, help="Origin header value (omit for none)")
    p_eval.add_argument("--method", default="GET")
    p_eval.add_argument("--env", choices=["development", "production"], default=None)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "serve": cmd_serve,
        "check-config": cmd_check_config,
        "evaluate": cmd_evaluate,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="powerprofile")
    sub = parser.add_subparsers(dest="command")

    check_p = sub.add_parser("check", help="Evaluate signals once and suspend if allowed")
    check_p.set_defaults(_handler="check")

    debug_p = sub.add_parser("debug", help="Print readings and flags without acting")
    debug_p.set_defaults(_handler="debug")

    status_p = sub.add_parser("status", help="Show timer status and today's log")
    status_p.add_argument(
        "-n",
        "--lines",
        type=int,
        default=20,
        help="Number of log lines to show (default: 20)",
    )
    status_p.set_defaults(_handler="status")

    init_p = sub.add_parser("init", help="Install + enable systemd user timer")
    init_p.add_argument("--force", action="store_true", help="Overwrite existing units")
    init_p.add_argument(
        "--interval",
        type=int,
        default=5,
        help="Minutes between checks (default: 5)",
    )
    init_p.set_defaults(_handler="init")

    parser.set_defaults(_handler="check")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args._handler == "check":
        from powerprofile.cli.check import main as check_main

        return int(check_main())

    if args._handler == "debug":
        from powerprofile.cli.debug import main as debug_main

        return int(debug_main())

    if args._handler == "status":
        from powerprofile.cli.status import main as status_main

        return int(status_main(lines=int(getattr(args, "lines", 20))))

    if args._handler == "init":
        from powerprofile.cli.init import main as init_main

        return int(
            init_main(
                force=bool(getattr(args, "force", False)),
                interval_minutes=int(getattr(args, "interval", 5)),
            )
        )

    raise RuntimeError(f"Unknown command: {args._handler}")


if __name__ == "__main__":
    raise SystemExit(main())

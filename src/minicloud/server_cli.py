"""CLI entry point for the MiniCloud control plane server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="minicloud-server",
        description="MiniCloud control plane: databases and apps on Kubernetes",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: MINICLOUD_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: MINICLOUD_PORT or 8080)")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Local dev mode: SQLite database file instead of PostgreSQL",
    )
    parser.add_argument("--kubectl", default=None, help="Path to the kubectl binary")
    args = parser.parse_args(argv)

    # Environment must be set before minicloud.config is first imported.
    if args.local:
        os.environ["MINICLOUD_LOCAL_MODE"] = "1"
    if args.kubectl:
        os.environ["MINICLOUD_KUBECTL_BIN"] = args.kubectl

    import uvicorn

    from minicloud.config import settings

    uvicorn.run(
        "minicloud.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()

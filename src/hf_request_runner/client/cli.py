"""Command-line entry point: send one request to the HF router and print the JSON."""
from __future__ import annotations
import argparse
import logging
import sys

import httpx

from hf_request_runner.common.config import load_cfg
from hf_request_runner.common.errors import RunError
from hf_request_runner.common.logging_setup import setup_logging
from hf_request_runner.client.runner import RequestRunner

LOGGER = logging.getLogger("hf_request.client.cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hf-request",
        description="Send one inference request to the Hugging Face router and print the JSON response",
    )
    ap.add_argument("--input", dest="text", default=None, help="Input text (default: config or built-in prompt)")
    ap.add_argument("--chat", action="store_const", const="chat", dest="mode", help="Use the chat-completions endpoint")
    ap.add_argument("--model", default=None, help="Model id")
    ap.add_argument("--url", default=None, help="Override the endpoint URL")
    ap.add_argument("--max-tokens", type=int, default=None)
    ap.add_argument("--temperature", type=float, default=None)
    ap.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: httpx default)")
    ap.add_argument("--config", default=None, help="YAML run config")
    ap.add_argument("--env-file", default=None, help="Env file to load (default: ./.env)")
    ap.add_argument("--code", action="store_true", help="Print the extracted Python code instead of the JSON")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    try:
        cfg = load_cfg(
            args.config,
            overrides={
                "mode": args.mode,
                "model": args.model,
                "url": args.url,
                "input": args.text,
                "max_tokens": args.max_tokens,
                "temperature": args.temperature,
                "timeout": args.timeout,
                "env_file": args.env_file,
            },
        )
        runner = RequestRunner(cfg, transport=transport)
        data = runner.run()
        output = runner.render(data, code=args.code)
    except RunError as e:
        LOGGER.debug("Run failed at %s stage", e.stage, exc_info=True)
        print(f"error: {e.stage}: {e}", file=sys.stderr)
        return e.exit_code

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

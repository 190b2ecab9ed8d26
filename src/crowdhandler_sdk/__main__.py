import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv
from loguru import logger

from crowdhandler_sdk.agent_lang import StaticAgentLanguageProvider
from crowdhandler_sdk.config import SdkConfig, load_json_config, parse_sdk_config, resolve_runtime_env
from crowdhandler_sdk.logging_config import enable_logging, setup_logging
from crowdhandler_sdk.session import RequestSession
from crowdhandler_sdk.waiting_room import waiting_room_url


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crowdhandler_sdk",
        description="Check URLs against a CrowdHandler waiting room.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Create or refresh a queue request for a URL")
    check.add_argument("url", help="Protected URL to check")
    check.add_argument("--token", default=None, help="Existing CrowdHandler token to refresh")

    report = sub.add_parser("report", help="Report the time taken to serve a promoted request")
    report.add_argument("response_id", help="responseID from a promoted decision")
    report.add_argument("elapsed_ms", type=int, help="Elapsed time in milliseconds")
    report.add_argument("--status", type=int, default=200, help="HTTP status served to the visitor")

    return parser


def create_session(api_key: str, base_url: str | None, config: SdkConfig, token: str | None = None) -> RequestSession:
    return RequestSession(
        api_key,
        base_url=base_url or config.base_url,
        token=token,
        timeout_seconds=config.timeout_seconds,
        agent_language=StaticAgentLanguageProvider(config.agent, config.lang),
        serialize=config.serialize_requests,
    )


async def run(args: argparse.Namespace) -> int:
    load_dotenv()

    config = parse_sdk_config(load_json_config())
    # drop loguru's default sink; the configured ones replace it
    logger.remove()
    enable_logging()
    setup_logging(level=config.log_level, consumers=config.log_consumers)

    env = resolve_runtime_env()
    if not env.api_key:
        logger.error(f"{env.api_key_env_var} environment variable is required.")
        return 1

    token = getattr(args, "token", None)
    session = create_session(env.api_key, env.base_url, config, token)
    if args.command == "check":
        decision = await session.create_or_fetch(args.url)
        print(json.dumps(decision.to_json(), indent=2))
        if not decision.is_promoted:
            slug = decision.slug or ""
            print(f"Waiting room: {waiting_room_url(slug, session.token, config.waiting_room_mode)}")
    else:
        try:
            await session.report_elapsed_time(args.response_id, args.elapsed_ms, args.status)
        except ValueError as ex:
            logger.error(f"Invalid report: {ex}")
            return 2
        print(f"Reported {args.elapsed_ms} ms for {args.response_id}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())

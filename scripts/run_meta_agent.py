#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import httpx  # noqa: E402

from meta_agent.backend import constants  # noqa: E402
from meta_agent.backend.assistants import TaskRequest  # noqa: E402
from meta_agent.backend.main import configure_logging  # noqa: E402
from meta_agent.backend.pipeline import run_isolated  # noqa: E402
from meta_agent.backend.response import now_iso  # noqa: E402
from meta_agent.backend.runtime import build_runtime  # noqa: E402
from meta_agent.backend.settings import load_settings  # noqa: E402


DEFAULT_INTENT = "bootstrap"
DEFAULT_DESCRIPTION = "Meta-agent bootstrap"


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive the admin, client and courier assistants.")
    parser.add_argument("intent", nargs="?", default=DEFAULT_INTENT)
    parser.add_argument("description", nargs="*")
    parser.add_argument(
        "--mode",
        choices=["isolated", "pipeline", "endpoints"],
        default="isolated",
        help="isolated: all assistants concurrently, no chaining; "
        "pipeline: sequential in-process run; "
        "endpoints: call a running task-hosting service stage by stage.",
    )
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--timeout", type=float, default=constants.DEFAULT_STAGE_TIMEOUT_S)
    return parser.parse_args(argv)


def _run_endpoints(base_url: str, intent: str, description: str, timeout_s: float) -> Dict[str, Any]:
    base = base_url.rstrip("/")
    context: Dict[str, Any] = {}
    responses: Dict[str, Any] = {}
    with httpx.Client(timeout=timeout_s) as client:
        for stage in constants.STAGE_ORDER:
            url = f"{base}/assistant/{constants.STAGE_ROUTES[stage]}"
            response = client.post(url, json={"goal": intent, "description": description, "context": context})
            body = response.json()
            responses[stage] = {"httpStatus": response.status_code, "body": body}
            output_key = constants.STAGE_OUTPUT_KEYS.get(stage)
            if output_key:
                context = {output_key: body.get("data")}
    return responses


def main(argv: List[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)
    description = " ".join(args.description) or DEFAULT_DESCRIPTION
    payload: Dict[str, Any] = {"intent": args.intent, "description": description, "timestamp": now_iso()}

    if args.mode == "endpoints":
        try:
            payload["results"] = _run_endpoints(args.base_url, args.intent, description, args.timeout)
        except httpx.HTTPError as exc:
            print(f"Endpoint run failed: {exc}", file=sys.stderr)
            return 1
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    runtime = build_runtime(settings)
    try:
        if args.mode == "pipeline":
            payload["pipeline"] = runtime.orchestrator.run(intent=args.intent, description=description)
            exit_code = 0 if payload["pipeline"]["status"] == "ok" else 1
        else:
            request = TaskRequest(intent=args.intent, description=description)
            payload["results"] = run_isolated(runtime.task_functions(), request)
            exit_code = 0 if all(item["ok"] for item in payload["results"]) else 1
    finally:
        runtime.close()

    logging.getLogger(__name__).info("Run finished in %s mode", args.mode)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())

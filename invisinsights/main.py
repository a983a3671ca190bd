import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import uvicorn
from dotenv import load_dotenv

from invisinsights.agents.response_builder import ResponseBuilder
from invisinsights.agents.schema_mapper import SchemaAutoMapper
from invisinsights.agents.schema_validator import SchemaValidator
from invisinsights.config import Settings, setup_logging
from invisinsights.errors import InvisInsightsError, SchemaValidationError
from invisinsights.models.state import IntentScores
from invisinsights.server import create_app

logger = logging.getLogger(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="""
InvisInsights - behavioural session analysis to survey responses

Serves the collection API, or runs schema discovery and answer synthesis
offline against JSON files.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', type=str, default='0.0.0.0', help='Bind address (default: 0.0.0.0)')
    serve.add_argument('--port', type=int, default=None, help='Port (default: $PORT or 3000)')

    validate = subparsers.add_parser('validate', help='Validate a survey config JSON file')
    validate.add_argument('--config', type=str, required=True, help='Survey config JSON file')

    map_cmd = subparsers.add_parser('map', help='Auto-map a raw survey definition to a survey config')
    map_cmd.add_argument('--details', type=str, required=True, help='Survey details JSON file')
    map_cmd.add_argument('--survey-id', type=str, required=True, help='Survey identifier')
    map_cmd.add_argument('--collector-id', type=str, required=True, help='Collector identifier')
    map_cmd.add_argument('--output', type=str, default=None, help='Write the config here instead of stdout')

    synthesize = subparsers.add_parser('synthesize', help='Build a submission payload from intent scores')
    synthesize.add_argument('--config', type=str, required=True, help='Survey config JSON file')
    synthesize.add_argument('--analysis', type=str, required=True, help='Reasoning-service output JSON file')
    synthesize.add_argument('--output', type=str, default=None, help='Write the payload here instead of stdout')

    return parser


def load_json(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json_output(data: Dict, output_path: Optional[str]) -> None:
    """Write JSON to a file, or stdout when no path is given"""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output_path is None:
        print(text)
        return
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(text)
    logger.info(f"Saved output to {output_path}")


def run_validate(args) -> int:
    config = SchemaValidator().validate(load_json(args.config))
    logger.info(f"Config valid: {len(config.questions)} questions, intents {[i.value for i in config.intents]}")
    write_json_output(config.model_dump(mode='json'), None)
    return 0


def run_map(args) -> int:
    config = SchemaAutoMapper().auto_map(args.survey_id, args.collector_id, load_json(args.details))
    write_json_output(config.model_dump(mode='json'), args.output)
    return 0


def run_synthesize(args) -> int:
    config = SchemaValidator().validate(load_json(args.config))
    scores = IntentScores.from_analysis(load_json(args.analysis))
    payload = ResponseBuilder().build(scores, config)
    if payload is None:
        logger.warning("No question could be answered from this analysis")
        return 1
    write_json_output(payload.to_wire(), args.output)
    return 0


def run_serve(args, settings: Settings) -> int:
    port = args.port or settings.port
    logger.info(f"InvisInsights API listening on {port}")
    uvicorn.run(create_app(settings), host=args.host, port=port)
    return 0


def main(argv=None) -> int:
    load_dotenv()
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    setup_logging(args.debug or settings.debug)

    try:
        if args.command == 'serve':
            return run_serve(args, settings)
        if args.command == 'validate':
            return run_validate(args)
        if args.command == 'map':
            return run_map(args)
        return run_synthesize(args)
    except SchemaValidationError as e:
        logger.error(f"{str(e)}:")
        for problem in e.problems:
            logger.error(f"  - {problem}")
        return 2
    except InvisInsightsError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())

import json
import logging

import click

from services.scoring_engine.models import ScoringModel
from src.core.config import assessment_settings
from src.core.logging_config import setup_logging
from src.services.assessment import AssessmentService

logger = logging.getLogger(__name__)


@click.command()
@click.argument("responses_path", metavar="RESPONSES", type=click.Path(dir_okay=False))
@click.option("--model", type=click.Choice([m.value for m in ScoringModel]), default=None,
              help=f"Scoring model (default: {assessment_settings.scoring_model.value})")
@click.option("--prompt", type=click.Choice(["none", "deep", "brief"]), default="none", show_default=True,
              help="Also print the chat messages for the report-writing model")
@click.pass_context
def main(ctx, responses_path, model, prompt):
    """Score a JSON object of question id -> raw answer and optionally build report prompts."""
    setup_logging(assessment_settings.log_level)

    try:
        with open(responses_path, "r", encoding="utf-8") as f:
            responses = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read responses from {responses_path}: {e}")
        ctx.exit(1)
    if not isinstance(responses, dict):
        logger.error("Responses file must contain a JSON object")
        ctx.exit(1)

    service = AssessmentService(scoring_model=model)
    scores = service.score(responses)
    output = {"scoringModel": service.scoring_model.value, "scores": scores.model_dump(by_alias=True)}

    if prompt == "deep":
        output["messages"] = service.build_report_messages(responses, scores)
    elif prompt == "brief":
        try:
            output["messages"] = service.build_brief_report_messages(responses, scores)
        except ValueError as e:
            logger.error(str(e))
            ctx.exit(2)

    click.echo(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()

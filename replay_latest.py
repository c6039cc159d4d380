"""Re-run the pipeline on the most recent row of the response sheet."""
import logging

from ra_intake.config import load_settings
from ra_intake.email import GmailMailer
from ra_intake.pipeline import handle_form_submit
from ra_intake.sheet import fetch_latest_named_values

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
logger = logging.getLogger("replay_latest")


def run():
    settings = load_settings()
    named_values = fetch_latest_named_values(settings)
    if named_values is None:
        logger.info("No submissions found")
        return
    handle_form_submit(named_values, settings, GmailMailer(settings))
    logger.info("Replay completed - check your email!")


if __name__ == '__main__':
    run()

"""CLI: ask the tutor one question and print the formatted reply. For the web app, use: python -m app.main."""
import argparse
import sys

from dotenv import load_dotenv

load_dotenv()

from app.core.conversation import APOLOGY_TEXT
from app.core.formatter import format_response, strip_markup
from app.core.tutor_client import TutorServiceError, ask


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ask the AI tutor a question.")
    parser.add_argument("question", help="Question to send")
    parser.add_argument("--plain", action="store_true", help="Print text only, without markup")
    parser.add_argument("--url", default=None, help="Tutor endpoint (default: TUTOR_API_URL)")
    args = parser.parse_args(argv)

    if not args.question.strip():
        parser.error("question must not be empty")

    try:
        reply = ask(args.question, url=args.url)
    except TutorServiceError:
        print(APOLOGY_TEXT, file=sys.stderr)
        return 1

    markup = format_response(reply)
    # Structured replies are JSON, not markup
    print(strip_markup(markup) if args.plain and isinstance(reply, str) else markup)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Main entry point for the TravelHub pricing service."""

import json
import sys
from pathlib import Path
from typing import Any

from travelhub.config import get_settings
from travelhub.parsers.offering_parser import parse_service_selection, parse_stay_request
from travelhub.services.pricing import calculate_booking
from travelhub.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

USAGE = "Usage: python -m travelhub.main [quote <request.json>|serve]"


# =============================================================================
# CLI Commands
# =============================================================================


def quote_from_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Price a booking request payload.

    Payload shape::

        {
            "property": {"pricePerNight": "100.00"},
            "checkIn": "2025-06-01",
            "checkOut": "2025-06-04",
            "services": [{"id": "chef-1", "hourlyRate": "20", "duration": 2}]
        }
    """
    stay = parse_stay_request(
        payload.get("property"),
        payload.get("checkIn"),
        payload.get("checkOut"),
    )
    selections = [
        parse_service_selection(offering, duration=offering.get("duration"))
        for offering in payload.get("services", [])
    ]
    return calculate_booking(stay, selections).to_display()


def cmd_quote(path: str) -> None:
    """Print the price breakdown of a JSON booking request."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    logger.info("quoting_booking_request", path=path)
    print(json.dumps(quote_from_payload(payload), indent=2))


def cmd_serve() -> None:
    """Run the pricing API."""
    import uvicorn

    from travelhub.api.app import app

    settings = get_settings()
    uvicorn.run(app, host=settings.app.api_host, port=settings.app.api_port)


def main() -> None:
    """Main entry point."""
    settings = get_settings()
    setup_logging(settings.app.log_level, settings.app.log_format)

    command = sys.argv[1] if len(sys.argv) > 1 else "serve"

    if command == "quote" and len(sys.argv) > 2:
        cmd_quote(sys.argv[2])
    elif command == "serve":
        cmd_serve()
    else:
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()

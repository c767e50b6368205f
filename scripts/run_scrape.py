"""
Run one mapped scrape from the CLI and print the record as JSON.
"""

from __future__ import annotations

import argparse
import json
import sys

from app.domain.scraping import GalleryUpdateInput, SceneUpdateInput
from app.scraping.errors import ScrapeError
from app.scraping.logging_utils import configure_logging
from app.scraping.storage import SQLAlchemyEntityStore
from app.services.scraping_service import ScrapingService
from db.session import SessionLocal


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape metadata with a configured mapped scraper.")
    parser.add_argument("--scraper", dest="scraper", default=None, help="Scraper id from the config file.")
    parser.add_argument(
        "--kind",
        dest="kind",
        default="scene",
        choices=["performer", "scene", "gallery", "movie"],
        help="Record kind for --url lookups.",
    )
    lookup = parser.add_mutually_exclusive_group(required=True)
    lookup.add_argument("--url", dest="url", help="Scrape a record from this URL.")
    lookup.add_argument("--name", dest="name", help="Search performers by name.")
    lookup.add_argument("--scene-id", dest="scene_id", help="Scrape a stored scene by id.")
    lookup.add_argument("--gallery-id", dest="gallery_id", help="Scrape a stored gallery by id.")
    return parser


def main() -> int:
    configure_logging()
    args = _build_parser().parse_args()
    if args.url is None and not args.scraper:
        print("--scraper is required for name and fragment lookups", file=sys.stderr)
        return 2

    service = ScrapingService()
    try:
        if args.url is not None:
            record = service.scrape_url(kind=args.kind, url=args.url, scraper_id=args.scraper)
            payload = record.to_payload() if record is not None else None
        elif args.name is not None:
            performers = service.search_performers(scraper_id=args.scraper, name=args.name)
            payload = [performer.to_payload() for performer in performers]
        else:
            with SessionLocal() as db:
                store = SQLAlchemyEntityStore(session=db)
                if args.scene_id is not None:
                    record = service.scrape_scene_fragment(
                        scraper_id=args.scraper,
                        update=SceneUpdateInput(id=args.scene_id),
                        store=store,
                    )
                else:
                    record = service.scrape_gallery_fragment(
                        scraper_id=args.scraper,
                        update=GalleryUpdateInput(id=args.gallery_id),
                        store=store,
                    )
            payload = record.to_payload() if record is not None else None
    except ScrapeError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

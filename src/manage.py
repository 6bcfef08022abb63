"""Pricing engine management CLI.

Operational helpers for checking how the engine sees a destination and
which zone tables are in effect.

Usage:
    python src/manage.py zone --city Cairo --country EG
    python src/manage.py zone --city Tanta --state Gharbia --country EG --store store-1
    python src/manage.py show-config
"""

import argparse
import json
import sys


def show_zone(city, country, state=None, postal_code=None, store_id=None):
    """Print the zone, speed multiplier and estimated hours for a destination."""
    from pricing.shipping.resolver import ShippingZoneResolver

    resolver = ShippingZoneResolver()
    zone = resolver.determine_zone(city, state, country, postal_code=postal_code, store_id=store_id)

    print(f"Zone:            {zone.value}")
    print(f"Multiplier:      {resolver.get_zone_multiplier(zone)}")
    print(f"Estimated hours: {resolver.get_estimated_delivery_hours(zone)}")
    return zone


def show_config():
    """Print the effective zone configuration as JSON."""
    from pricing.shipping import get_zone_configuration

    print(json.dumps(get_zone_configuration().to_dict(), indent=2, sort_keys=True))


def main(argv=None):
    from pricing.utils import logging as pricing_logging

    parser = argparse.ArgumentParser(description="Pricing engine management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    zone_parser = subparsers.add_parser("zone", help="Resolve the shipping zone for a destination")
    zone_parser.add_argument("--city", required=True)
    zone_parser.add_argument("--country", required=True)
    zone_parser.add_argument("--state", help="Governorate or state")
    zone_parser.add_argument("--postal-code", dest="postal_code")
    zone_parser.add_argument("--store", dest="store_id", help="Resolve with this store's shipping configuration")

    subparsers.add_parser("show-config", help="Print the effective zone configuration")

    args = parser.parse_args(argv)

    pricing_logging.configure_logging()

    from pricing.domain import pricing

    pricing.init(traverse=False)

    with pricing.domain_context():
        if args.command == "zone":
            show_zone(args.city, args.country, state=args.state, postal_code=args.postal_code, store_id=args.store_id)
        elif args.command == "show-config":
            show_config()
        else:
            parser.print_help()
            sys.exit(1)


if __name__ == "__main__":
    main()

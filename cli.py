#!/usr/bin/env python3
"""
Extract Google Maps Leads - Command Line Interface

Usage:
    python cli.py --query "Restaurant in Karachi"
    python cli.py -q "Coffee Karachi" --pages 3 --output coffee.xlsx -v
"""
import argparse
import sys
from pathlib import Path

from maps_leads import (
    GOOGLE_MAPS_API_KEY,
    PlacesProvider,
    SearchController,
    results_to_dataframe,
    export_to_excel,
    build_export_filename,
    get_summary_stats,
)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search Google Maps and export business contact details",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -q "Restaurant in Karachi"
  %(prog)s -q "Coffee Karachi" --pages 3 -o coffee.xlsx
  %(prog)s --query "Gym in Lahore" -v
        """
    )

    parser.add_argument(
        '-q', '--query',
        required=True,
        help='Place query (e.g. "Restaurant in Karachi")'
    )

    parser.add_argument(
        '-p', '--pages',
        type=int,
        default=1,
        help='Maximum number of result pages to fetch (default: 1, Google returns at most 3)'
    )

    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Output file path (default: leads_<query>_<date>.xlsx)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show detailed progress information'
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main CLI function."""
    args = parse_args(argv)

    # Check API key
    if not GOOGLE_MAPS_API_KEY:
        print("Error: GOOGLE_MAPS_API_KEY not found in environment variables.")
        print("Please set it in your .env file or export it as an environment variable.")
        sys.exit(1)

    if not args.query.strip():
        print("Error: Please provide a non-empty query.")
        sys.exit(1)

    try:
        provider = PlacesProvider.from_api_key(GOOGLE_MAPS_API_KEY)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    controller = SearchController(provider)

    print(f"\n🔍 Searching Google Maps for: {args.query}")

    try:
        controller.submit_search(args.query)
        controller.wait_until_idle()

        pages = 1
        while pages < args.pages and controller.load_more():
            if args.verbose:
                state = controller.snapshot()
                print(f"   Page {pages}: {len(state.results)} places so far, loading next page...")
            controller.wait_until_idle()
            pages += 1

        state = controller.snapshot()
    finally:
        controller.close()

    if state.error:
        print(f"Error during search: {state.error}")
        sys.exit(1)

    results = state.results
    if not results:
        print("No results found. Please try a different search.")
        sys.exit(0)

    print(f"✅ Found {len(results)} places")

    stats = get_summary_stats(results)
    print(f"\n📊 Summary:")
    print(f"   Total places: {stats['total_places']}")
    print(f"   With phone: {stats['with_phone']}")
    print(f"   With website: {stats['with_website']}")
    print(f"   Average rating: {stats['avg_rating']}")

    # Determine output path
    output_path = Path(args.output or build_export_filename(state.query))
    if output_path.suffix.lower() != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')

    df = results_to_dataframe(results)
    export_to_excel(df, output_path)

    print(f"\n💾 Results saved to: {output_path}")

    if args.verbose:
        print("\n📝 Sample results:")
        print(df[['Name', 'Phone', 'Website']].head().to_string(index=False))

    print("\n✨ Done!")


if __name__ == "__main__":
    main()

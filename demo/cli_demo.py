#!/usr/bin/env python3
"""
CLI demo for Movie Identifier Service.

Identifies the movie in each screenshot passed on the command line.

Usage:
    python demo/cli_demo.py scene.jpg
    python demo/cli_demo.py scene1.png scene2.webp --verbose
"""
import argparse
import asyncio
import logging
import sys

from movie_identifier import MovieIdentifierApp, load_config_from_env, load_image
from movie_identifier.exceptions import ConfigurationError
from movie_identifier.memory import Failed, Succeeded
from movie_identifier.security import FileValidationError


def print_banner():
    """Print welcome banner."""
    print("\n" + "=" * 60)
    print("  Zilla - Identify a movie from a single scene")
    print("=" * 60 + "\n")


def print_state(image_path, state):
    """Print the result card or the error banner."""
    print(f"\n🖼️  Image: {image_path}")
    
    if isinstance(state, Succeeded):
        outcome = state.outcome
        print(f"🎬 Title: {outcome.title}")
        print(f"📅 Release Year: {outcome.release_year}")
        print(f"🎭 Main Actors: {outcome.main_actors}")
        print(f"📖 Synopsis: {outcome.synopsis}")
        if outcome.sources:
            print("🔗 Information Sources:")
            for source in outcome.sources:
                print(f"   - {source.title} ({source.uri})")
    elif isinstance(state, Failed):
        print(f"❌ {state.message}")
    
    print("-" * 60)


async def identify_all(app, image_paths):
    """Identify each image in turn; returns the number of failures."""
    failures = 0
    for image_path in image_paths:
        try:
            image = load_image(image_path, max_size=app.config.max_upload_bytes)
        except FileValidationError as e:
            print(f"\n❌ {image_path}: {e}")
            failures += 1
            continue
        
        app.select_image(image)
        state = await app.identify()
        print_state(image_path, state)
        if not isinstance(state, Succeeded):
            failures += 1
        app.clear_image()
    return failures


def main(argv=None):
    parser = argparse.ArgumentParser(description="Identify movies from screenshots.")
    parser.add_argument("images", nargs="+", help="Image files (.jpg, .jpeg, .png, .webp)")
    parser.add_argument("--verbose", action="store_true", help="Show retry and debug logs")
    args = parser.parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    
    print_banner()
    
    try:
        app = MovieIdentifierApp(load_config_from_env())
        app.initialize()
    except ConfigurationError as e:
        print(f"\n❌ Failed to initialize service: {e}")
        print("Please check your environment variables and configuration.")
        return 1
    
    failures = asyncio.run(identify_all(app, args.images))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

# Main script to capture a single page into archive storage
import argparse
import logging
import sys
import uuid

import constants
from api_clients.asset_client import fetch_resource
from archiver import CaptureError, Processor
from config_loader import load_config
from file_handler import FileStore
from logger_setup import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Archive a web page and every resource it references.")
    parser.add_argument("--url", required=True, help="URL the page was captured from")
    parser.add_argument("--html", help="File holding the captured HTML (fetched from --url when omitted)")
    parser.add_argument("--archive-id", help="Archive id to use (a new UUID when omitted)")
    parser.add_argument("--config", default=constants.DEFAULT_CONFIG_FILE, help="Path to the JSON configuration file")
    return parser.parse_args(argv)


def read_page(args, processor, deadline):
    """Returns the captured HTML as bytes, or None if it could not be obtained."""
    if args.html:
        try:
            with open(args.html, 'rb') as f:
                return f.read()
        except OSError as e:
            logging.error(f"Could not read HTML file {args.html}: {e}")
            return None

    logging.info(f"No HTML file given; fetching {args.url}")
    resource = fetch_resource(args.url, deadline, config=processor.config)
    if resource is None:
        logging.error(f"Failed to fetch page {args.url}")
        return None
    return resource.body


# --- Main Execution ---
def main(argv=None):
    """Captures one page and prints the new archive id."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        print(f"Error: Could not load configuration from {args.config}: {e}", file=sys.stderr)
        return 1
    setup_logging(config['log_file'], config['log_level'])
    logging.info("--- Starting Page Archiver ---")

    store = FileStore(config['output_dir'])
    processor = Processor(store, config)
    archive_id = args.archive_id or str(uuid.uuid4())
    deadline = processor.new_deadline()

    raw_html = read_page(args, processor, deadline)
    if not raw_html:
        logging.error(f"No HTML to archive for {args.url}. Exiting.")
        return 1

    try:
        result = processor.process(archive_id, args.url, raw_html, deadline=deadline)
    except CaptureError as e:
        logging.error(f"Capture failed for {args.url}: {e}")
        return 1

    try:
        html_path = processor.save_capture(archive_id, result)
    except OSError as e:
        logging.error(f"Failed to save archive {archive_id}: {e}")
        return 1

    logging.info(f"Archive saved to {html_path} with {len(result.assets)} assets")
    logging.info("--- Page Archiver Finished ---")
    print(archive_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())

import json
import logging

from sheet_query import GSheetStore, GSheetStoreConfig, sheet_query
from sheet_query.shared.config import Config

logger = logging.getLogger("sheet_query")


def main():
    config = Config.from_env()

    store = GSheetStore.from_service_account(
        config.key_file,
        config.SHEET_ID,
        GSheetStoreConfig(max_retries=config.MAX_RETRIES),
    )

    query = sheet_query(store).from_(config.SHEET_NAME)

    headings = query.get_headings()
    rows = query.get_rows()

    logger.info(f"Headings: {headings}")
    logger.info(f"Total rows: {len(rows)}")

    for row in rows:
        logger.info(f"Row {row.handle.position}: {json.dumps(row, default=str)}")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logger.info("=== STARTING SCRIPT ===")
    main()
    logger.info("=== SCRIPT COMPLETED ===")

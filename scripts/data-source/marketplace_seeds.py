import argparse
import asyncio
import json

from marketplace_api.application.interfaces.service_interfaces import TableServiceInterface
from marketplace_api.infrastructure.azure_credential_manager import get_credential_manager
from marketplace_api.infrastructure.repositories.table_storage_service import TableStorageService
from shared.config.settings import settings
from shared.models.listing import Listing
from shared.models.search_alert import SearchAlert
from shared.models.trainer import Trainer
from shared.utils.constants import PartitionKeys
from shared.utils.logging_config import get_logger, setup_logging

setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_to_console=settings.log_to_console
    )
logger = get_logger(__name__)

DATA_DIR = "scripts/data-source"

SEEDS = {
    "trainers": (f"{DATA_DIR}/trainers_data.json", Trainer, PartitionKeys.TRAINER, "trainer_id",
                 settings.trainers_table_name),
    "listings": (f"{DATA_DIR}/listings_data.json", Listing, PartitionKeys.LISTING, "listing_id",
                 settings.listings_table_name),
    "search_alerts": (f"{DATA_DIR}/search_alerts_data.json", SearchAlert, PartitionKeys.SEARCH_ALERT, "alert_id",
                      settings.search_alerts_table_name),
}


async def seed_entities(table_client: TableServiceInterface, records: list, partition_key: PartitionKeys, id_field: str) -> bool:
    """Upsert every record into the table, keyed by its id field."""
    tasks = []
    row_keys = []
    for record in records:
        row_key = getattr(record, id_field)
        row_keys.append(row_key)
        logger.info(f"Queuing entity with Row Key: {row_key}")
        tasks.append(table_client.upsert_entity(
            entity=record.to_dict(),
            partition_key=partition_key.value,
            row_key=row_key
        ))

    results = await asyncio.gather(*tasks, return_exceptions=True)

    success_count = 0
    for row_key, result in zip(row_keys, results):
        if isinstance(result, Exception):
            logger.error(f"Failed to seed entity {row_key}: {result}")
        else:
            success_count += 1

    logger.info(f"Seeding complete: {success_count}/{len(records)} successful")
    return success_count == len(records)


async def main(targets: list[str]):
    all_completed = True
    for target in targets:
        json_filename, model, partition_key, id_field, table_name = SEEDS[target]
        table_client = TableStorageService(storage_account_url=settings.table_storage_account_url,
                                           table_name=table_name)
        try:
            await table_client.ensure_table()
            with open(json_filename, "r") as f:
                records = [model.from_dict(item) for item in json.load(f)]
            completed = await seed_entities(table_client, records, partition_key, id_field)
            all_completed = all_completed and completed
        finally:
            await table_client.close()

    await get_credential_manager().close()

    if all_completed:
        logger.info("Marketplace seeding completed successfully.")
    else:
        logger.error("Marketplace seeding failed.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the marketplace tables from the JSON fixtures.")
    parser.add_argument("--only", choices=sorted(SEEDS), action="append",
                        help="Seed only this table (repeatable, default: all)")
    args = parser.parse_args()
    asyncio.run(main(args.only or sorted(SEEDS)))

import logging

from django.db import transaction

from core_backend.exceptions import (
    AlreadyMergedError,
    InsufficientTablesError,
    InvalidInputError,
    InvalidReferenceError,
    storage_guard,
)

from .models import Table

logger = logging.getLogger(__name__)


class TableService:
    """Occupancy and merge management for dining tables."""

    @staticmethod
    def get_table(table_id, lock=False) -> Table:
        queryset = Table.objects.select_for_update() if lock else Table.objects.all()
        try:
            return queryset.get(pk=table_id)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise InvalidReferenceError("Table", table_id)

    @staticmethod
    @storage_guard
    @transaction.atomic
    def merge_tables(table_ids) -> Table:
        """
        Merge tables into one seating group. The first id becomes the primary;
        every other table points at it. All of them become OCCUPIED.

        Returns the primary table.
        """
        if not isinstance(table_ids, (list, tuple)) or len(table_ids) < 2:
            raise InsufficientTablesError()
        if len(set(table_ids)) != len(table_ids):
            raise InvalidInputError("A table cannot be merged with itself.", table_ids=table_ids)

        # Lock in id order so concurrent merges touching the same tables queue up
        try:
            locked = {
                table.pk: table
                for table in Table.objects.select_for_update().filter(pk__in=table_ids).order_by("pk")
            }
        except (ValueError, TypeError):
            raise InvalidInputError("Table ids must be integers.", table_ids=table_ids)

        for table_id in table_ids:
            if table_id not in locked:
                raise InvalidReferenceError("Table", table_id)

        primary = locked[table_ids[0]]
        satellites = [locked[table_id] for table_id in table_ids[1:]]

        if primary.merged_with_id is not None:
            raise AlreadyMergedError(primary)
        for table in satellites:
            if table.merged_with_id is not None:
                raise AlreadyMergedError(table)
            if Table.objects.filter(merged_with_id=table.pk).exists():
                raise AlreadyMergedError(
                    table, message=f"Table {table.number} already has tables merged into it."
                )

        for table in satellites:
            table.merged_with = primary
            table.status = Table.TableStatus.OCCUPIED
            table.save(update_fields=["merged_with", "status", "updated_at"])

        primary.status = Table.TableStatus.OCCUPIED
        primary.save(update_fields=["status", "updated_at"])

        logger.info(
            "Merged tables %s into table %s",
            [table.number for table in satellites],
            primary.number,
        )
        return primary

    @staticmethod
    @storage_guard
    @transaction.atomic
    def unmerge_tables(primary_table_id) -> Table:
        """
        Split a merged group. Satellites lose their link and, together with the
        primary, become VACANT.
        """
        primary = TableService.get_table(primary_table_id, lock=True)
        if primary.merged_with_id is not None:
            raise InvalidInputError(
                f"Table {primary.number} is merged into another table; unmerge its primary instead.",
                primary_table_id=primary.merged_with_id,
            )

        TableService._release(primary)
        logger.info("Unmerged table %s", primary.number)
        return primary

    @staticmethod
    @storage_guard
    @transaction.atomic
    def update_table_status(table_id, status) -> Table:
        if status not in Table.TableStatus.values:
            raise InvalidInputError(f"'{status}' is not a valid table status.", status=status)

        table = TableService.get_table(table_id, lock=True)
        previous = table.status
        table.status = status
        table.save(update_fields=["status", "updated_at"])
        logger.info("Table %s: Status transition %s -> %s", table.number, previous, status)
        return table

    @staticmethod
    @transaction.atomic
    def occupy_table(table: Table) -> Table:
        if table.status != Table.TableStatus.OCCUPIED:
            table.status = Table.TableStatus.OCCUPIED
            table.save(update_fields=["status", "updated_at"])
        return table

    @staticmethod
    @transaction.atomic
    def release_table(table: Table) -> Table:
        """Mark a table VACANT and dissolve any merge group it heads."""
        table = TableService.get_table(table.pk, lock=True)
        TableService._release(table)
        logger.info("Released table %s", table.number)
        return table

    @staticmethod
    def _release(primary: Table):
        satellites = list(
            Table.objects.select_for_update().filter(merged_with_id=primary.pk).order_by("pk")
        )
        for satellite in satellites:
            satellite.merged_with = None
            satellite.status = Table.TableStatus.VACANT
            satellite.save(update_fields=["merged_with", "status", "updated_at"])

        primary.status = Table.TableStatus.VACANT
        primary.save(update_fields=["status", "updated_at"])

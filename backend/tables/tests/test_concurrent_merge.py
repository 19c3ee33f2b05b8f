"""
Concurrent Merge Tests

Two hosts merging overlapping tables at the same moment must leave one
consistent group: one merge wins, the other is told the table is taken.
"""
import pytest
from threading import Barrier, Thread

from django.db import connection

from core_backend.exceptions import AlreadyMergedError
from tables.models import Table
from tables.services import TableService


@pytest.mark.django_db(transaction=True)
class TestConcurrentMerge:

    def test_overlapping_merges_have_one_winner(self, table_1, table_2, table_3):
        requests = [[table_1.pk, table_2.pk], [table_2.pk, table_3.pk]]
        barrier = Barrier(len(requests))
        merged = []
        errors = []

        def merge(table_ids):
            try:
                barrier.wait()
                merged.append(TableService.merge_tables(table_ids).pk)
            except AlreadyMergedError as exc:
                errors.append(exc)
            finally:
                connection.close()

        threads = [Thread(target=merge, args=(table_ids,)) for table_ids in requests]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(merged) == 1, f"Expected exactly one merge, got {merged}"
        assert len(errors) == 1, f"Expected one AlreadyMergedError, got {errors}"

        primary = Table.objects.get(pk=merged[0])
        satellites = list(Table.objects.filter(merged_with__isnull=False))
        assert len(satellites) == 1
        assert satellites[0].merged_with_id == primary.pk
        assert primary.merged_with_id is None
        assert primary.effective_capacity == primary.capacity + satellites[0].capacity

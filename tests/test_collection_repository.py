import threading
import unittest

from infrastructure.memory.collection_repository_memory import (
    CollectionStoreClosedError,
    InMemoryCollectionRepository,
)


class InMemoryCollectionRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryCollectionRepository()

    def test_get_unknown_user_returns_none(self):
        self.assertIsNone(self.repo.get("telegram:1"))

    def test_merge_counts_each_emoji(self):
        self.repo.merge("u", ["a", "b", "a"])
        self.repo.merge("u", ["b", "c"])

        collection = self.repo.get("u")
        self.assertEqual(collection.items, (("a", 2), ("b", 2), ("c", 1)))
        self.assertEqual(collection.total, 5)
        self.assertEqual(len(collection), 3)
        self.assertEqual(collection.quantity_of("b"), 2)
        self.assertEqual(collection.quantity_of("z"), 0)

    def test_first_seen_order_never_changes(self):
        self.repo.merge("u", ["x", "y"])
        self.repo.merge("u", ["z", "y", "y", "x"])
        self.repo.merge("u", ["w"])

        self.assertEqual(self.repo.get("u").emojis, ["x", "y", "z", "w"])

    def test_users_are_independent(self):
        self.repo.merge("u1", ["a"])
        self.repo.merge("u2", ["b", "b"])

        self.assertEqual(self.repo.get("u1").items, (("a", 1),))
        self.assertEqual(self.repo.get("u2").items, (("b", 2),))
        self.assertEqual(self.repo.user_count(), 2)

    def test_empty_merge_creates_an_entry(self):
        self.repo.merge("u", [])

        collection = self.repo.get("u")
        self.assertIsNotNone(collection)
        self.assertEqual(collection.items, ())

    def test_snapshot_is_not_affected_by_later_merges(self):
        self.repo.merge("u", ["a"])
        snapshot = self.repo.get("u")
        self.repo.merge("u", ["a", "b"])

        self.assertEqual(snapshot.items, (("a", 1),))

    def test_merge_after_close_fails_but_reads_still_work(self):
        self.repo.merge("u", ["a"])
        self.repo.close()
        self.repo.close()

        self.assertTrue(self.repo.closed)
        with self.assertRaises(CollectionStoreClosedError):
            self.repo.merge("u", ["b"])
        self.assertEqual(self.repo.get("u").items, (("a", 1),))

    def test_context_manager_closes_store(self):
        with InMemoryCollectionRepository() as repo:
            repo.merge("u", ["a"])
        self.assertTrue(repo.closed)

    def test_close_waits_for_entry_creation_in_progress(self):
        repo = InMemoryCollectionRepository()
        closer = threading.Thread(target=repo.close)

        with repo._entries_lock:
            closer.start()
            closer.join(timeout=0.2)
            self.assertTrue(closer.is_alive())
            self.assertFalse(repo._closed)

        closer.join()
        self.assertTrue(repo.closed)

    def test_merge_for_new_user_after_close_creates_no_entry(self):
        self.repo.close()

        with self.assertRaises(CollectionStoreClosedError):
            self.repo.merge("late", ["a"])
        self.assertIsNone(self.repo.get("late"))
        self.assertEqual(self.repo.user_count(), 0)


class ConcurrentMergeTests(unittest.TestCase):
    THREADS = 16
    MERGES_PER_THREAD = 250
    EMOJIS = ("a", "b", "c", "d", "e", "f", "g", "h")

    def _run_threads(self, target) -> None:
        barrier = threading.Barrier(self.THREADS)

        def worker(index: int) -> None:
            barrier.wait()
            target(index)

        threads = [
            threading.Thread(target=worker, args=(i,)) for i in range(self.THREADS)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def test_no_lost_updates_for_the_same_user(self):
        repo = InMemoryCollectionRepository()

        def merge_many(index: int) -> None:
            for n in range(self.MERGES_PER_THREAD):
                repo.merge("shared", [self.EMOJIS[(index + n) % len(self.EMOJIS)]])

        self._run_threads(merge_many)

        collection = repo.get("shared")
        self.assertEqual(collection.total, self.THREADS * self.MERGES_PER_THREAD)
        expected_each = self.THREADS * self.MERGES_PER_THREAD // len(self.EMOJIS)
        for emoji in self.EMOJIS:
            self.assertEqual(collection.quantity_of(emoji), expected_each)

    def test_batches_for_the_same_user_are_atomic(self):
        repo = InMemoryCollectionRepository()
        seen_totals = []

        def merge_and_read(index: int) -> None:
            for _ in range(self.MERGES_PER_THREAD):
                repo.merge("shared", self.EMOJIS[:5])
                seen_totals.append(repo.get("shared").total)

        self._run_threads(merge_and_read)

        self.assertTrue(all(total % 5 == 0 for total in seen_totals))
        self.assertEqual(
            repo.get("shared").total, self.THREADS * self.MERGES_PER_THREAD * 5
        )

    def test_many_users_in_parallel(self):
        repo = InMemoryCollectionRepository()

        def merge_own(index: int) -> None:
            for _ in range(self.MERGES_PER_THREAD):
                repo.merge(f"user-{index}", ["a", "b"])

        self._run_threads(merge_own)

        self.assertEqual(repo.user_count(), self.THREADS)
        for index in range(self.THREADS):
            collection = repo.get(f"user-{index}")
            self.assertEqual(
                collection.items,
                (("a", self.MERGES_PER_THREAD), ("b", self.MERGES_PER_THREAD)),
            )


if __name__ == "__main__":
    unittest.main()

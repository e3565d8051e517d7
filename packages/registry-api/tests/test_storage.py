# SPDX-License-Identifier: MIT
"""Tests for version catalog backends."""

import json
import threading
from pathlib import Path

import pytest
from fakeredis import FakeRedis
from redis.exceptions import ConnectionError as RedisConnectionError

from registry_api.config import StorageConfig
from registry_api.models.provider import ProviderVersion, ProviderVersions
from registry_api.storage import (
    CatalogDecodeError,
    CatalogError,
    FilesystemCatalog,
    InvalidProviderKeyError,
    MemoryCatalog,
    ProviderKey,
    RedisCatalog,
    create_catalog,
)
from registry_api.storage.rwlock import ReadWriteLock

AWS = ProviderKey("hashicorp", "aws")

DUPLICATE_VERSIONS = {
    "versions": [
        {"version": "5.1.0", "protocols": ["5.0"]},
        {"version": "5.1.0", "protocols": ["6.0"]},
    ]
}
DUPLICATE_PLATFORMS = {
    "versions": [
        {
            "version": "5.1.0",
            "platforms": [
                {"os": "linux", "arch": "amd64", "shasum": "first"},
                {"os": "linux", "arch": "amd64", "shasum": "second"},
            ],
        }
    ]
}


def make_versions(*versions: str, protocol: str = "5.0") -> ProviderVersions:
    return ProviderVersions(
        versions=[ProviderVersion(version=v, protocols=[protocol]) for v in versions]
    )


class TestProviderKey:
    """Tests for provider key construction."""

    def test_storage_key(self):
        assert AWS.storage_key == "hashicorp/aws"
        assert str(AWS) == "hashicorp/aws"

    def test_keys_are_hashable_and_equal_by_value(self):
        assert {AWS: 1}[ProviderKey("hashicorp", "aws")] == 1

    @pytest.mark.parametrize(
        "namespace,name",
        [
            ("", "aws"),
            ("hashicorp", ""),
            ("hashi/corp", "aws"),
            ("hashicorp", "a/ws"),
            ("..", "aws"),
            ("hashicorp", ".aws"),
            ("-hashicorp", "aws"),
            ("hashicorp", "a" * 65),
            ("hashi corp", "aws"),
        ],
    )
    def test_invalid_segments(self, namespace: str, name: str):
        with pytest.raises(InvalidProviderKeyError):
            ProviderKey(namespace, name)

    def test_separator_cannot_collide(self):
        """Pairs that would concatenate to the same string cannot both exist."""
        with pytest.raises(InvalidProviderKeyError):
            ProviderKey("a/b", "c")
        assert ProviderKey("a", "b_c").storage_key != ProviderKey("a_b", "c").storage_key


class TestMemoryCatalog:
    """Tests for the in-process catalog."""

    def test_read_missing(self):
        catalog = MemoryCatalog()
        assert catalog.read(AWS) is None
        assert len(catalog) == 0

    def test_reading_missing_keys_allocates_no_locks(self):
        catalog = MemoryCatalog()
        for i in range(1000):
            assert catalog.read(ProviderKey("hashicorp", f"missing{i}")) is None
        assert catalog._locks == {}

        catalog.write(AWS, make_versions("1.0.0"))
        assert list(catalog._locks) == [AWS]

    def test_write_then_read(self):
        catalog = MemoryCatalog()
        catalog.write(AWS, make_versions("5.1.0"))

        output = catalog.read(AWS)
        assert output is not None
        assert output.versions[0].version == "5.1.0"
        assert output.versions[0].protocols == ["5.0"]

    def test_write_replaces_whole_collection(self):
        catalog = MemoryCatalog()
        catalog.write(AWS, make_versions("1.0.0", "2.0.0"))
        catalog.write(AWS, make_versions("3.0.0"))

        assert [v.version for v in catalog.read(AWS).versions] == ["3.0.0"]

    def test_values_are_isolated_from_callers(self):
        catalog = MemoryCatalog()
        versions = make_versions("1.0.0")
        catalog.write(AWS, versions)

        versions.versions.append(ProviderVersion(version="9.9.9"))
        read_back = catalog.read(AWS)
        read_back.versions.clear()

        assert [v.version for v in catalog.read(AWS).versions] == ["1.0.0"]

    def test_writes_to_distinct_keys_do_not_block(self):
        """A writer holding one key never blocks a write to another key."""
        catalog = MemoryCatalog()
        other = ProviderKey("hashicorp", "google")
        lock = catalog._lock_for(AWS)
        lock.acquire_write()
        try:
            writer = threading.Thread(target=catalog.write, args=(other, make_versions("1.0.0")))
            writer.start()
            writer.join(timeout=2)
            assert not writer.is_alive()
        finally:
            lock.release_write()

        assert catalog.read(other) is not None

    def test_writes_to_same_key_are_exclusive(self):
        """A second writer to a held key waits until the first releases it."""
        catalog = MemoryCatalog()
        lock = catalog._lock_for(AWS)
        lock.acquire_write()
        writer = threading.Thread(target=catalog.write, args=(AWS, make_versions("1.0.0")))
        try:
            writer.start()
            writer.join(timeout=0.2)
            assert writer.is_alive()
            assert AWS not in catalog._providers
        finally:
            lock.release_write()

        writer.join(timeout=2)
        assert not writer.is_alive()
        assert catalog.read(AWS).versions[0].version == "1.0.0"

    def test_readers_never_observe_partial_collections(self):
        """Every read sees one writer's complete collection."""
        catalog = MemoryCatalog()
        catalog.write(AWS, make_versions(*[str(i) for i in range(20)], protocol="w0"))
        errors: list[str] = []

        def writer(tag: str) -> None:
            for _ in range(200):
                catalog.write(AWS, make_versions(*[str(i) for i in range(20)], protocol=tag))

        def reader() -> None:
            for _ in range(200):
                versions = catalog.read(AWS)
                protocols = {v.protocols[0] for v in versions.versions}
                if len(versions.versions) != 20 or len(protocols) != 1:
                    errors.append(f"torn read: {protocols}")

        writers = [threading.Thread(target=writer, args=(f"w{i}",)) for i in range(3)]
        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in writers + readers:
            t.start()
        for t in writers + readers:
            t.join()

        assert errors == []


class TestFilesystemCatalog:
    """Tests for the JSON-document catalog."""

    def test_path_layout(self, tmp_path: Path):
        catalog = FilesystemCatalog(tmp_path)
        assert catalog.path_for(AWS) == tmp_path / "hashicorp" / "aws.json"

    def test_read_missing(self, tmp_path: Path):
        assert FilesystemCatalog(tmp_path).read(AWS) is None

    def test_write_then_read(self, tmp_path: Path):
        catalog = FilesystemCatalog(tmp_path)
        catalog.write(AWS, make_versions("5.1.0"))

        document = json.loads((tmp_path / "hashicorp" / "aws.json").read_text())
        assert document["versions"][0]["version"] == "5.1.0"
        assert catalog.read(AWS).versions[0].version == "5.1.0"
        assert list((tmp_path / "hashicorp").glob("*.tmp")) == []

    def test_reads_reparse_the_file(self, tmp_path: Path):
        """Changes made on disk are visible on the next read."""
        catalog = FilesystemCatalog(tmp_path)
        catalog.write(AWS, make_versions("1.0.0"))

        path = catalog.path_for(AWS)
        path.write_text(json.dumps({"versions": [{"version": "2.0.0", "protocols": ["6.0"]}]}))

        assert catalog.read(AWS).versions[0].version == "2.0.0"

    def test_reads_hand_written_documents(self, tmp_path: Path):
        """Documents with only some platform fields decode with defaults."""
        (tmp_path / "hashicorp").mkdir()
        (tmp_path / "hashicorp" / "aws.json").write_text(
            json.dumps(
                {
                    "versions": [
                        {
                            "version": "5.1.0",
                            "protocols": ["5.0"],
                            "platforms": [{"os": "linux", "arch": "amd64", "shasum": "abc"}],
                        }
                    ]
                }
            )
        )

        platform = FilesystemCatalog(tmp_path).read(AWS).versions[0].platforms[0]
        assert platform.shasum == "abc"
        assert platform.download_url == ""
        assert platform.signing_keys.gpg_public_keys == []

    def test_invalid_document(self, tmp_path: Path):
        (tmp_path / "hashicorp").mkdir()
        (tmp_path / "hashicorp" / "aws.json").write_text("{not json")

        with pytest.raises(CatalogDecodeError):
            FilesystemCatalog(tmp_path).read(AWS)

    def test_duplicate_versions_are_an_encoding_fault(self, tmp_path: Path):
        """A document listing one version twice is never served or upserted into."""
        (tmp_path / "hashicorp").mkdir()
        (tmp_path / "hashicorp" / "aws.json").write_text(json.dumps(DUPLICATE_VERSIONS))

        with pytest.raises(CatalogDecodeError):
            FilesystemCatalog(tmp_path).read(AWS)

    def test_duplicate_platforms_are_an_encoding_fault(self, tmp_path: Path):
        (tmp_path / "hashicorp").mkdir()
        (tmp_path / "hashicorp" / "aws.json").write_text(json.dumps(DUPLICATE_PLATFORMS))

        with pytest.raises(CatalogDecodeError):
            FilesystemCatalog(tmp_path).read(AWS)

    def test_read_only_rejects_writes(self, tmp_path: Path):
        catalog = FilesystemCatalog(tmp_path, read_only=True)
        with pytest.raises(CatalogError):
            catalog.write(AWS, make_versions("1.0.0"))
        assert not (tmp_path / "hashicorp").exists()

    def test_unreadable_path_is_a_fault(self, tmp_path: Path):
        """A directory where the document should be is a backend fault, not absence."""
        (tmp_path / "hashicorp" / "aws.json").mkdir(parents=True)
        with pytest.raises(CatalogError):
            FilesystemCatalog(tmp_path).read(AWS)


class TestRedisCatalog:
    """Tests for the Redis hash catalog."""

    @pytest.fixture
    def redis_client(self) -> FakeRedis:
        return FakeRedis()

    def test_read_missing(self, redis_client: FakeRedis):
        assert RedisCatalog(redis_client).read(AWS) is None

    def test_read_returns_stored_value(self, redis_client: FakeRedis):
        catalog = RedisCatalog(redis_client)
        catalog.write(AWS, make_versions("5.1.0"))

        output = catalog.read(AWS)
        assert output is not None
        assert output.versions[0].version == "5.1.0"

    def test_records_live_in_collection_hash(self, redis_client: FakeRedis):
        catalog = RedisCatalog(redis_client, collection="tfregistry")
        catalog.write(AWS, make_versions("5.1.0"))

        raw = redis_client.hget("tfregistry", "hashicorp/aws")
        assert json.loads(raw)["versions"][0]["version"] == "5.1.0"

    def test_empty_collection_rejected(self, redis_client: FakeRedis):
        with pytest.raises(ValueError):
            RedisCatalog(redis_client, collection="")

    def test_read_fault(self, redis_client: FakeRedis, monkeypatch):
        def fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        monkeypatch.setattr(redis_client, "hget", fail)
        with pytest.raises(CatalogError):
            RedisCatalog(redis_client).read(AWS)

    def test_write_fault(self, redis_client: FakeRedis, monkeypatch):
        def fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        monkeypatch.setattr(redis_client, "hset", fail)
        with pytest.raises(CatalogError):
            RedisCatalog(redis_client).write(AWS, make_versions("1.0.0"))

    def test_corrupt_record(self, redis_client: FakeRedis):
        redis_client.hset("tfregistry", "hashicorp/aws", "garbage")
        with pytest.raises(CatalogDecodeError):
            RedisCatalog(redis_client).read(AWS)

    def test_duplicate_versions_are_an_encoding_fault(self, redis_client: FakeRedis):
        redis_client.hset("tfregistry", "hashicorp/aws", json.dumps(DUPLICATE_VERSIONS))
        with pytest.raises(CatalogDecodeError):
            RedisCatalog(redis_client).read(AWS)


class TestCreateCatalog:
    """Tests for backend selection."""

    def test_memory(self):
        assert isinstance(create_catalog(StorageConfig(backend="memory")), MemoryCatalog)

    def test_filesystem(self, tmp_path: Path):
        catalog = create_catalog(
            StorageConfig(backend="filesystem", providers_dir=str(tmp_path), read_only=True)
        )
        assert isinstance(catalog, FilesystemCatalog)
        assert catalog.root == tmp_path
        assert catalog.read_only is True

    def test_redis(self):
        catalog = create_catalog(
            StorageConfig(backend="redis", redis_url="redis://localhost:6399/0")
        )
        assert isinstance(catalog, RedisCatalog)
        assert catalog.collection == "tfregistry"

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_catalog(StorageConfig(backend="datastore"))


class TestReadWriteLock:
    """Tests for the reader/writer lock."""

    def test_readers_share(self):
        lock = ReadWriteLock()
        lock.acquire_read()
        other_reader = threading.Thread(target=lock.acquire_read)
        other_reader.start()
        other_reader.join(timeout=2)
        assert not other_reader.is_alive()

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        lock.acquire_read()
        writer = threading.Thread(target=lambda: (lock.acquire_write(), lock.release_write()))
        writer.start()
        writer.join(timeout=0.2)
        assert writer.is_alive()

        lock.release_read()
        writer.join(timeout=2)
        assert not writer.is_alive()

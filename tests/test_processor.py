"""Envelope-level store/restore."""

import asyncio
import logging

import pytest

from payload_store import (
    Blob,
    BlobReadError,
    FormData,
    PathBlob,
    PayloadRestoreError,
    ProcessorConfig,
    RestorePolicy,
    from_storable,
    is_storable,
    to_storable,
)

KIOQ = "data:text/plain;base64,Kioq"


class TestToStorable:
    @pytest.mark.asyncio
    async def test_no_payload(self):
        obj = {"url": "https://api.domain.com", "method": "GET"}
        result = await to_storable(obj)
        assert result == obj

    @pytest.mark.asyncio
    async def test_none_payload(self):
        obj = {"payload": None}
        assert await to_storable(obj) == {"payload": None}

    @pytest.mark.asyncio
    async def test_string_payload(self):
        obj = {"payload": "test"}
        result = await to_storable(obj)
        assert result == {"payload": "test"}

    @pytest.mark.asyncio
    async def test_blob_payload(self):
        obj = {"method": "POST", "payload": Blob(b"***", type="text/plain")}
        result = await to_storable(obj)
        assert result == {"method": "POST", "blob": KIOQ}
        assert "payload" in obj

    @pytest.mark.asyncio
    async def test_multipart_payload(self):
        b = Blob(b"***", type="text/plain")
        fd = FormData()
        fd.append("file", b, "file-name")
        fd.append("text", "abcd")
        fd.append("text-part", b, "text-part")
        result = await to_storable({"payload": fd})
        assert "payload" not in result
        assert isinstance(result["multipart"], list)
        assert len(result["multipart"]) == 3

    @pytest.mark.asyncio
    async def test_multipart_without_entries_drops_payload(self):
        class NoEntries(FormData):
            entries = None

        result = await to_storable({"url": "x", "payload": NoEntries()})
        assert result == {"url": "x"}

    @pytest.mark.asyncio
    async def test_unknown_payload_left_alone(self):
        obj = {"payload": 12}
        assert await to_storable(obj) is obj

    @pytest.mark.asyncio
    async def test_read_failure_fails_whole_encode(self, tmp_path):
        fd = FormData()
        fd.append("text", "abcd")
        fd.append("file", PathBlob(tmp_path / "gone.bin"), "gone.bin")
        with pytest.raises(BlobReadError):
            await to_storable({"payload": fd})

    @pytest.mark.asyncio
    async def test_caller_can_bound_encode(self):
        result = await asyncio.wait_for(to_storable({"payload": Blob(b"***", "text/plain")}), timeout=5)
        assert result["blob"] == KIOQ


class TestFromStorable:
    def test_nothing_to_restore(self):
        assert from_storable({}) == {}

    def test_restores_blob(self):
        result = from_storable({"blob": KIOQ, "url": "x"})
        payload = result["payload"]
        assert isinstance(payload, Blob)
        assert payload.type == "text/plain"
        assert payload.size == 3
        assert "blob" not in result
        assert result["url"] == "x"

    def test_restores_multipart(self):
        result = from_storable({"multipart": [{"isFile": False, "name": "test-name", "value": "test-value"}]})
        assert result["payload"].get("test-name") == "test-value"
        assert "multipart" not in result

    def test_empty_multipart(self):
        result = from_storable({"multipart": []})
        assert isinstance(result["payload"], FormData)
        assert len(result["payload"]) == 0

    def test_multipart_wins_over_blob(self):
        result = from_storable({"multipart": [], "blob": KIOQ})
        assert isinstance(result["payload"], FormData)
        assert result["blob"] == KIOQ

    def test_does_not_mutate_input(self):
        obj = {"blob": KIOQ}
        from_storable(obj)
        assert obj == {"blob": KIOQ}

    def test_malformed_blob_dropped_by_default(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = from_storable({"blob": "not-a-data-url", "url": "x"})
        assert result == {"url": "x"}
        assert "Unable to restore payload" in caplog.text

    def test_malformed_blob_preserved(self):
        config = ProcessorConfig(restore_policy=RestorePolicy.PRESERVE)
        result = from_storable({"blob": "not-a-data-url"}, config)
        assert result == {"blob": "not-a-data-url"}

    def test_malformed_blob_raises(self):
        config = ProcessorConfig(restore_policy=RestorePolicy.RAISE)
        with pytest.raises(PayloadRestoreError) as exc:
            from_storable({"blob": "not-a-data-url"}, config)
        assert exc.value.details == {"field": "blob"}

    def test_malformed_part_raises_under_raise_policy(self):
        config = ProcessorConfig(restore_policy=RestorePolicy.RAISE)
        with pytest.raises(PayloadRestoreError):
            from_storable({"multipart": [{"isFile": True, "name": "f", "value": "bad"}]}, config)

    @pytest.mark.parametrize("policy", [RestorePolicy.DROP, RestorePolicy.PRESERVE])
    def test_non_list_multipart_degrades(self, policy, caplog):
        with caplog.at_level(logging.WARNING):
            result = from_storable({"multipart": 5, "url": "x"}, ProcessorConfig(restore_policy=policy))
        assert "payload" not in result
        assert result.get("multipart") == (5 if policy is RestorePolicy.PRESERVE else None)
        assert "Unable to restore payload" in caplog.text

    def test_non_list_multipart_raises(self):
        config = ProcessorConfig(restore_policy=RestorePolicy.RAISE)
        with pytest.raises(PayloadRestoreError) as exc:
            from_storable({"multipart": 5}, config)
        assert exc.value.details == {"field": "multipart"}

    def test_empty_blob_left_alone(self, caplog):
        obj = {"blob": "", "url": "x"}
        with caplog.at_level(logging.WARNING):
            result = from_storable(obj)
        assert result is obj
        assert caplog.text == ""

    def test_invalid_record_shape_dropped(self):
        result = from_storable({"multipart": [{"value": "no name"}]})
        assert result == {}


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_blob_with_media_type_parameters(self):
        stored = await to_storable({"payload": Blob(b"***", "text/plain;charset=utf-8")})
        assert stored == {"blob": KIOQ}
        restored = from_storable(stored)
        assert restored["payload"] == Blob(b"***", "text/plain")

    @pytest.mark.asyncio
    async def test_multipart_with_media_type_parameters(self):
        fd = FormData()
        fd.append("f", Blob(b"***", "text/plain;charset=utf-8"), "f.txt")
        restored = from_storable(await to_storable({"payload": fd}))["payload"]
        assert restored.get("f") == Blob(b"***", "text/plain")

    @pytest.mark.asyncio
    async def test_blob(self):
        stored = await to_storable({"payload": Blob(bytes(range(10)), "application/octet-stream")})
        restored = from_storable(stored)
        assert await restored["payload"].read() == bytes(range(10))
        assert restored["payload"].type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_multipart(self):
        fd = FormData(text_parts={"note"})
        fd.append("A", "first")
        fd.append("B", Blob(b"\x89PNG", "image/png"), "img.png")
        fd.append("note", Blob("", "text/plain"))
        stored = await to_storable({"payload": fd})
        restored = from_storable(stored)["payload"]
        assert restored.keys() == ["A", "B", "note"]
        assert restored.text_parts == {"note"}
        entries = list(restored.entries())
        assert entries[1].filename == "img.png"
        assert await entries[1].value.read() == b"\x89PNG"
        assert await entries[2].value.read() == b""
        assert (await to_storable({"payload": restored})) == stored


def test_is_storable():
    assert is_storable({})
    assert is_storable({"payload": "text"})
    assert not is_storable({"payload": Blob(b"")})
    assert not is_storable({"payload": FormData()})

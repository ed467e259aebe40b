from ol_doc_pipeline_core.util import compute_checksum, sha256_text


def test_compute_checksum_of_empty_input() -> None:
    assert (
        compute_checksum(b"")
        == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_compute_checksum_known_digest() -> None:
    assert (
        compute_checksum(b"abc")
        == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_compute_checksum_is_lowercase_hex() -> None:
    digest = compute_checksum(b"%PDF-1.7 lecture slides")
    assert len(digest) == 64
    assert digest == digest.lower()
    assert compute_checksum(b"%PDF-1.7 lecture slides") == digest
    assert compute_checksum(b"%PDF-1.7 lecture slides!") != digest


def test_sha256_text_matches_utf8_bytes() -> None:
    assert sha256_text("héllo") == compute_checksum("héllo".encode("utf-8"))

import os

import pytest

from errors import ExportIOError, PathError
from exporter import export_kept, find_sidecar


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return str(path)


def _case_sensitive(folder):
    probe = folder / "case_probe.CR3"
    probe.write_bytes(b"")
    sensitive = not (folder / "case_probe.cr3").exists()
    probe.unlink()
    return sensitive


def test_export_mirrors_image_and_sidecar(tmp_path):
    image = _write(tmp_path / "a" / "b" / "img1.jpg", b"jpeg-bytes")
    _write(tmp_path / "a" / "b" / "img1.CR3", b"raw-bytes")

    result = export_kept([image], str(tmp_path))

    out = tmp_path / "kept_images" / "a" / "b"
    assert (out / "img1.jpg").read_bytes() == b"jpeg-bytes"
    assert (out / "img1.CR3").read_bytes() == b"raw-bytes"
    assert result.images_copied == 1
    assert result.sidecars_copied == 1
    assert result.output_folder == os.path.join(str(tmp_path), "kept_images")


def test_export_lowercase_sidecar(tmp_path):
    image = _write(tmp_path / "IMG_2.JPG", b"jpeg")
    _write(tmp_path / "IMG_2.cr3", b"raw")

    export_kept([image], str(tmp_path))

    assert (tmp_path / "kept_images" / "IMG_2.cr3").read_bytes() == b"raw"


def test_export_uppercase_sidecar_wins(tmp_path):
    if not _case_sensitive(tmp_path):
        pytest.skip("filesystem is case-insensitive")
    image = _write(tmp_path / "shot.jpg", b"jpeg")
    _write(tmp_path / "shot.CR3", b"upper")
    _write(tmp_path / "shot.cr3", b"lower")

    result = export_kept([image], str(tmp_path))

    out = tmp_path / "kept_images"
    assert (out / "shot.CR3").read_bytes() == b"upper"
    assert not (out / "shot.cr3").exists()
    assert result.sidecars_copied == 1


def test_export_without_sidecar(tmp_path):
    image = _write(tmp_path / "solo.jpeg", b"jpeg")
    _write(tmp_path / "solo.xmp", b"xmp")

    result = export_kept([image], str(tmp_path))

    assert sorted(os.listdir(tmp_path / "kept_images")) == ["solo.jpeg"]
    assert result.sidecars_copied == 0


def test_find_sidecar(tmp_path):
    if not _case_sensitive(tmp_path):
        pytest.skip("filesystem is case-insensitive")
    image = _write(tmp_path / "x.jpg", b"")
    assert find_sidecar(image) is None

    _write(tmp_path / "x.cr3", b"")
    assert find_sidecar(image) == str(tmp_path / "x.cr3")

    _write(tmp_path / "x.CR3", b"")
    assert find_sidecar(image) == str(tmp_path / "x.CR3")


def test_export_empty_list_creates_output_folder(tmp_path):
    result = export_kept([], str(tmp_path))
    assert os.path.isdir(result.output_folder)
    assert result.images_copied == 0


def test_path_outside_root_aborts(tmp_path):
    root = tmp_path / "root"
    inside = _write(root / "in.jpg", b"in")
    outside = _write(tmp_path / "elsewhere" / "out.jpg", b"out")

    with pytest.raises(PathError):
        export_kept([inside, outside], str(root))

    assert (root / "kept_images" / "in.jpg").exists()


def test_sibling_prefix_is_not_inside_root(tmp_path):
    root = tmp_path / "photos"
    root.mkdir()
    sibling = _write(tmp_path / "photos2" / "a.jpg", b"a")

    with pytest.raises(PathError):
        export_kept([sibling], str(root))


def test_copy_failure_aborts_and_keeps_partial_output(tmp_path):
    first = _write(tmp_path / "first.jpg", b"1")
    missing = str(tmp_path / "missing.jpg")
    last = _write(tmp_path / "last.jpg", b"3")

    with pytest.raises(ExportIOError):
        export_kept([first, missing, last], str(tmp_path))

    out = tmp_path / "kept_images"
    assert (out / "first.jpg").read_bytes() == b"1"
    assert not (out / "last.jpg").exists()


def test_directory_creation_failure_aborts(tmp_path):
    first = _write(tmp_path / "first.jpg", b"1")
    blocked = _write(tmp_path / "sub" / "second.jpg", b"2")
    _write(tmp_path / "kept_images" / "sub", b"not a directory")

    with pytest.raises(ExportIOError):
        export_kept([first, blocked], str(tmp_path))

    out = tmp_path / "kept_images"
    assert (out / "first.jpg").read_bytes() == b"1"
    assert (out / "sub").read_bytes() == b"not a directory"

import os
import struct

import pytest

from kernlib import mksfs
from kernlib.mksfs import SfsBuilder, SfsError, make_image, main

BLK = mksfs.SFS_BLKSIZE
NBLOCKS = 64


def block(img, n):
    return img[n * BLK:(n + 1) * BLK]


def inode(img, n):
    fields = struct.unpack_from("<IHHI12III", img, n * BLK)
    return {
        "size": fields[0],
        "type": fields[1],
        "nlinks": fields[2],
        "blocks": fields[3],
        "direct": list(fields[4:16]),
        "indirect": fields[16],
        "db_indirect": fields[17],
    }


def data_blocks(img, node):
    blocks = node["direct"][:node["blocks"]]
    rest = node["blocks"] - len(blocks)
    if rest > 0:
        blocks += list(struct.unpack_from(f"<{rest}I", img, node["indirect"] * BLK))
    return blocks


def read_file(img, node):
    data = b"".join(block(img, b) for b in data_blocks(img, node))
    return data[:node["size"]]


def read_dir(img, node):
    entries = {}
    for b in data_blocks(img, node):
        ino = struct.unpack_from("<I", img, b * BLK)[0]
        name = img[b * BLK + 4:b * BLK + 256].split(b"\0")[0]
        entries[name.decode()] = ino
    return entries


def blank_image(path, nblocks=NBLOCKS):
    path.write_bytes(bytes(nblocks * BLK))
    return path


@pytest.fixture
def home(tmp_path):
    root = tmp_path / "disk0"
    root.mkdir()
    (root / "hello").write_bytes(b"hello world\n")
    (root / ".hidden").write_bytes(b"invisible")
    sub = root / "sub"
    sub.mkdir()
    (sub / "inner").write_bytes(b"inner data")
    return root


def build(tmp_path, home, nblocks=NBLOCKS):
    image = blank_image(tmp_path / "sfs.img", nblocks)
    make_image(image, home)
    return image.read_bytes()


def test_superblock(tmp_path, home):
    img = build(tmp_path, home)
    magic, blocks, unused, info = struct.unpack_from("<III32s", img, 0)
    assert magic == mksfs.SFS_MAGIC
    assert blocks == NBLOCKS
    assert info.rstrip(b"\0") == b"simple file system"
    assert 0 < unused < NBLOCKS


def test_free_map_matches_unused_count(tmp_path, home):
    img = build(tmp_path, home)
    unused = struct.unpack_from("<I", img, 8)[0]
    free_bits = int.from_bytes(block(img, mksfs.SFS_BLKN_FREEMAP), "little")
    assert bin(free_bits).count("1") == unused
    # the highest free block is the last one of the image
    assert free_bits.bit_length() == NBLOCKS


def test_root_directory(tmp_path, home):
    img = build(tmp_path, home)
    root = inode(img, mksfs.SFS_BLKN_ROOT)
    assert root["type"] == mksfs.SFS_TYPE_DIR
    entries = read_dir(img, root)
    assert set(entries) == {".", "..", "hello", "sub"}
    assert entries["."] == mksfs.SFS_BLKN_ROOT
    assert entries[".."] == mksfs.SFS_BLKN_ROOT


def test_file_contents_round_trip(tmp_path, home):
    img = build(tmp_path, home)
    entries = read_dir(img, inode(img, mksfs.SFS_BLKN_ROOT))
    node = inode(img, entries["hello"])
    assert node["type"] == mksfs.SFS_TYPE_FILE
    assert read_file(img, node) == b"hello world\n"
    assert node["nlinks"] == 1


def test_subdirectory(tmp_path, home):
    img = build(tmp_path, home)
    root_entries = read_dir(img, inode(img, mksfs.SFS_BLKN_ROOT))
    sub = inode(img, root_entries["sub"])
    assert sub["type"] == mksfs.SFS_TYPE_DIR
    entries = read_dir(img, sub)
    assert entries[".."] == mksfs.SFS_BLKN_ROOT
    assert entries["."] == root_entries["sub"]
    assert read_file(img, inode(img, entries["inner"])) == b"inner data"


def test_file_using_indirect_block(tmp_path):
    root = tmp_path / "disk0"
    root.mkdir()
    payload = bytes(range(256)) * (13 * BLK // 256) + b"tail" * 25
    (root / "big").write_bytes(payload)
    img = build(tmp_path, root)
    node = inode(img, read_dir(img, inode(img, mksfs.SFS_BLKN_ROOT))["big"])
    assert node["indirect"] != 0
    assert node["size"] == len(payload)
    assert read_file(img, node) == payload


def test_hard_links_share_inode(tmp_path):
    root = tmp_path / "disk0"
    root.mkdir()
    (root / "a").write_bytes(b"shared")
    os.link(root / "a", root / "b")
    img = build(tmp_path, root)
    entries = read_dir(img, inode(img, mksfs.SFS_BLKN_ROOT))
    assert entries["a"] == entries["b"]
    node = inode(img, entries["a"])
    assert node["nlinks"] == 2
    assert read_file(img, node) == b"shared"


def test_symlink_stores_target(tmp_path):
    root = tmp_path / "disk0"
    root.mkdir()
    (root / "target").write_bytes(b"x")
    os.symlink("target", root / "link")
    img = build(tmp_path, root)
    entries = read_dir(img, inode(img, mksfs.SFS_BLKN_ROOT))
    node = inode(img, entries["link"])
    assert node["type"] == mksfs.SFS_TYPE_LINK
    assert read_file(img, node) == b"target"


def test_image_too_small(tmp_path, home):
    image = blank_image(tmp_path / "tiny.img", 3)
    with pytest.raises(SfsError, match="too small"):
        SfsBuilder(image)


def test_out_of_space(tmp_path):
    root = tmp_path / "disk0"
    root.mkdir()
    (root / "big").write_bytes(bytes(10 * BLK))
    image = blank_image(tmp_path / "small.img", 8)
    with pytest.raises(SfsError, match="out of disk space"):
        make_image(image, root)


def test_missing_image(tmp_path):
    with pytest.raises(SfsError, match="open"):
        SfsBuilder(tmp_path / "absent.img")


def test_home_must_be_directory(tmp_path, home):
    image = blank_image(tmp_path / "sfs.img")
    with SfsBuilder(image) as builder:
        with pytest.raises(SfsError, match="home directory"):
            builder.build(home / "hello")


def test_failed_build_leaves_no_superblock(tmp_path, home):
    image = blank_image(tmp_path / "sfs.img")
    with pytest.raises(RuntimeError):
        with SfsBuilder(image) as builder:
            builder.build(home)
            raise RuntimeError("abort")
    assert block(image.read_bytes(), mksfs.SFS_BLKN_SUPER) == bytes(BLK)


def test_main_usage(capsys):
    assert main(["only-one"]) == -1
    assert "usage" in capsys.readouterr().err


def test_main_success(tmp_path, home, capsys):
    image = blank_image(tmp_path / "sfs.img")
    assert main([str(image), str(home)]) == 0
    assert "successfully" in capsys.readouterr().out
    assert struct.unpack_from("<I", image.read_bytes(), 0)[0] == mksfs.SFS_MAGIC


def test_main_reports_error(tmp_path, home, capsys):
    assert main([str(tmp_path / "bad.bin"), str(home)]) == -1
    assert "invalid .img file name" in capsys.readouterr().err
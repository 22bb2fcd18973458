"""Build a simple file system image from a host directory tree."""

import logging
import os
import stat as _stat
import struct
import sys
from dataclasses import dataclass, field

__all__ = [
    "SFS_MAGIC",
    "SFS_BLKSIZE",
    "SFS_NDIRECT",
    "SFS_MAX_NBLKS",
    "SFS_MAX_FNAME_LEN",
    "SFS_MAX_FILE_SIZE",
    "SFS_TYPE_FILE",
    "SFS_TYPE_DIR",
    "SFS_TYPE_LINK",
    "SFS_BLKN_SUPER",
    "SFS_BLKN_ROOT",
    "SFS_BLKN_FREEMAP",
    "SfsError",
    "SfsBuilder",
    "make_image",
    "main",
]

log = logging.getLogger(__name__)

SFS_MAGIC = 0x2F8DBE2A
SFS_NDIRECT = 12
SFS_BLKSIZE = 4096
SFS_MAX_NBLKS = 1024 * 512
SFS_MAX_INFO_LEN = 31
SFS_MAX_FNAME_LEN = 255
SFS_MAX_FILE_SIZE = 1024 * 1024 * 128

SFS_BLKBITS = SFS_BLKSIZE * 8
SFS_TYPE_FILE = 1
SFS_TYPE_DIR = 2
SFS_TYPE_LINK = 3

SFS_BLKN_SUPER = 0
SFS_BLKN_ROOT = 1
SFS_BLKN_FREEMAP = 2

SFS_BLK_NENTRY = SFS_BLKSIZE // 4
SFS_L0_NBLKS = SFS_NDIRECT
SFS_L1_NBLKS = SFS_BLK_NENTRY + SFS_L0_NBLKS
SFS_L2_NBLKS = SFS_BLK_NENTRY * SFS_BLK_NENTRY + SFS_L1_NBLKS
SFS_LN_NBLKS = SFS_MAX_FILE_SIZE // SFS_BLKSIZE

_INFO = b"simple file system"
_SUPER = struct.Struct(f"<III{SFS_MAX_INFO_LEN + 1}s")
_INODE = struct.Struct(f"<IHHI{SFS_NDIRECT}III")
_ENTRY_NAME_SIZE = SFS_MAX_FNAME_LEN + 1
_WORD = struct.Struct("<I")


class SfsError(Exception):
    """Raised when an image cannot be built."""


@dataclass
class _CacheBlock:
    ino: int
    data: bytearray = field(default_factory=lambda: bytearray(SFS_BLKSIZE))

    def word(self, index):
        return _WORD.unpack_from(self.data, index * 4)[0]

    def set_word(self, index, value):
        _WORD.pack_into(self.data, index * 4, value)


@dataclass
class _CacheInode:
    real: int
    ino: int
    type: int
    size: int = 0
    nlinks: int = 0
    blocks: int = 0
    direct: list = field(default_factory=lambda: [0] * SFS_NDIRECT)
    indirect: int = 0
    db_indirect: int = 0
    nblks: int = 0
    l1: _CacheBlock = None
    l2: _CacheBlock = None

    def pack(self):
        return _INODE.pack(
            self.size, self.type, self.nlinks, self.blocks,
            *self.direct, self.indirect, self.db_indirect,
        )


class SfsBuilder:
    """Writes a simple file system into an existing ``.img`` file."""

    def __init__(self, image_path):
        name = os.fsdecode(image_path)
        if len(name) <= len(".img") or not name.endswith(".img"):
            raise SfsError(f"invalid .img file name '{name}'.")
        try:
            fd = os.open(image_path, os.O_WRONLY)
        except OSError as exc:
            raise SfsError(f"open '{name}' failed: {exc.strerror}") from exc
        self._image = os.fdopen(fd, "wb")
        self._closed = False
        try:
            size = os.fstat(fd).st_size
            ninos = size // SFS_BLKSIZE
            if ninos > SFS_MAX_NBLKS:
                ninos = SFS_MAX_NBLKS
                log.warning("img file is too big (%d bytes, only use %d blocks).", size, ninos)
            next_ino = SFS_BLKN_FREEMAP + (ninos + SFS_BLKBITS - 1) // SFS_BLKBITS
            if next_ino >= ninos:
                raise SfsError(
                    f"img file is too small ({size} bytes, {ninos} blocks, "
                    f"bitmap use at least {next_ino - 2} blocks)."
                )
        except BaseException:
            self._discard()
            raise
        self._ninos = ninos
        self._next_ino = next_ino
        self._unused_blocks = ninos - next_ino
        self._subpath = []
        self._blocks = {}
        self._inodes = []
        self._by_real = {}
        self._root = self._alloc_inode(0, SFS_BLKN_ROOT, SFS_TYPE_DIR)

    # allocation and caches

    def _alloc_ino(self):
        if self._next_ino >= self._ninos:
            raise SfsError("out of disk space.")
        self._unused_blocks -= 1
        ino = self._next_ino
        self._next_ino += 1
        return ino

    def _alloc_block(self):
        block = _CacheBlock(self._alloc_ino())
        self._blocks[block.ino] = block
        return block

    def _alloc_inode(self, real, ino, kind):
        node = _CacheInode(real=real, ino=ino or self._alloc_ino(), type=kind)
        self._inodes.append(node)
        self._by_real[real] = node
        return node

    def _update_cache(self, block, ino):
        if ino == 0:
            block = self._alloc_block()
            ino = block.ino
        elif block is None or block.ino != ino:
            block = self._blocks[ino]
        return block, ino

    # output

    def _where(self, name=None):
        path = "".join(f"{part}/" for part in self._subpath)
        return f"current is: /{path}{name or ''}\n"

    def _write_block(self, data, ino):
        if len(data) > SFS_BLKSIZE or ino >= self._ninos:
            raise SfsError(f"write {ino} block failed.")
        self._image.seek(ino * SFS_BLKSIZE)
        self._image.write(bytes(data).ljust(SFS_BLKSIZE, b"\0"))

    def _append_block(self, node, size, ino, name):
        nblks = node.nblks
        if nblks >= SFS_LN_NBLKS:
            raise SfsError(self._where(name) + "file is too big.")
        if nblks < SFS_L0_NBLKS:
            node.direct[nblks] = ino
        elif nblks < SFS_L1_NBLKS:
            node.l1, node.indirect = self._update_cache(node.l1, node.indirect)
            node.l1.set_word(nblks - SFS_L0_NBLKS, ino)
        else:
            nblks -= SFS_L1_NBLKS
            node.l2, node.db_indirect = self._update_cache(node.l2, node.db_indirect)
            slot = nblks // SFS_BLK_NENTRY
            node.l1, l1_ino = self._update_cache(node.l1, node.l2.word(slot))
            node.l2.set_word(slot, l1_ino)
            node.l1.set_word(nblks % SFS_BLK_NENTRY, ino)
        node.nblks += 1
        node.size += size
        node.blocks += 1

    def _add_entry(self, current, node, name):
        if current.type != SFS_TYPE_DIR or len(name) > SFS_MAX_FNAME_LEN:
            raise SfsError(self._where(os.fsdecode(name)) + "bad directory entry.")
        entry = (_WORD.pack(node.ino) + name).ljust(_ENTRY_NAME_SIZE, b"\0")[:_ENTRY_NAME_SIZE]
        entry_ino = self._alloc_ino()
        self._write_block(entry, entry_ino)
        self._append_block(current, _ENTRY_NAME_SIZE, entry_ino, os.fsdecode(name))
        node.nlinks += 1

    # tree walk

    def _open_dir(self, current, parent, dirpath):
        self._add_entry(current, current, b".")
        self._add_entry(current, parent, b"..")
        try:
            names = sorted(os.listdir(dirpath))
        except OSError as exc:
            raise SfsError(self._where() + f"opendir failed: {exc.strerror}") from exc
        for name in names:
            if name.startswith(b"."):
                continue
            text = os.fsdecode(name)
            if len(name) > SFS_MAX_FNAME_LEN:
                raise SfsError(self._where() + f"file name is too long: {text}")
            path = os.path.join(dirpath, name)
            try:
                info = os.lstat(path)
            except OSError as exc:
                raise SfsError(f"lstat '{text}' failed: {exc.strerror}") from exc
            mode = info.st_mode
            if _stat.S_ISLNK(mode):
                self._add_link(current, name, path, info.st_ino)
            elif _stat.S_ISDIR(mode):
                self._add_dir(current, name, path, info.st_ino)
            elif _stat.S_ISREG(mode):
                self._add_file(current, name, path, info.st_ino)
            else:
                kind = "?"
                if _stat.S_ISFIFO(mode):
                    kind = "f"
                if _stat.S_ISSOCK(mode):
                    kind = "s"
                if _stat.S_ISCHR(mode):
                    kind = "c"
                if _stat.S_ISBLK(mode):
                    kind = "b"
                log.warning("%sunsupported mode %07x (%s): file %s",
                            self._where(), mode, kind, text)

    def _add_dir(self, parent, name, path, real):
        text = os.fsdecode(name)
        if real in self._by_real:
            raise SfsError(self._where(text) + "directory already added.")
        current = self._alloc_inode(real, 0, SFS_TYPE_DIR)
        self._subpath.append(text)
        try:
            self._open_dir(current, parent, path)
        finally:
            self._subpath.pop()
        self._add_entry(parent, current, name)

    def _add_file(self, current, name, path, real):
        node = self._by_real.get(real)
        if node is None:
            node = self._alloc_inode(real, 0, SFS_TYPE_FILE)
            self._open_file(node, os.fsdecode(name), path)
        self._add_entry(current, node, name)

    def _add_link(self, current, name, path, real):
        node = self._alloc_inode(real, 0, SFS_TYPE_LINK)
        self._open_link(node, os.fsdecode(name), path)
        self._add_entry(current, node, name)

    def _open_file(self, node, name, path):
        try:
            with open(path, "rb") as source:
                while chunk := source.read(SFS_BLKSIZE):
                    ino = self._alloc_ino()
                    self._write_block(chunk, ino)
                    self._append_block(node, len(chunk), ino, name)
        except OSError as exc:
            raise SfsError(self._where(name) + f"read file failed: {exc.strerror}") from exc

    def _open_link(self, node, name, path):
        ino = self._alloc_ino()
        try:
            target = os.readlink(path)
        except OSError as exc:
            raise SfsError(self._where(name) + "read link failed.") from exc
        if len(target) >= SFS_BLKSIZE:
            raise SfsError(self._where(name) + f"read link failed, {SFS_BLKSIZE}")
        self._write_block(target, ino)
        self._append_block(node, len(target), ino, name)

    # public interface

    def build(self, home):
        """Copy the tree under ``home`` (hidden names excluded) into the image."""
        if self._closed:
            raise SfsError("image is already closed.")
        home_path = os.fsencode(home)
        if os.path.islink(home_path) or not os.path.isdir(home_path):
            raise SfsError(f"open home directory '{os.fsdecode(home)}' failed.")
        self._open_dir(self._root, self._root, home_path)

    def close(self):
        """Write the free map, superblock and cached blocks, then close the image."""
        if self._closed:
            return
        try:
            ino = SFS_BLKN_FREEMAP
            for start_bit in range(0, self._ninos, SFS_BLKBITS):
                bits = 0
                if start_bit + SFS_BLKBITS > self._next_ino:
                    start = max(self._next_ino - start_bit, 0)
                    end = min(SFS_BLKBITS, self._ninos - start_bit)
                    if end > start:
                        bits = ((1 << (end - start)) - 1) << start
                self._write_block(bits.to_bytes(SFS_BLKSIZE, "little"), ino)
                ino += 1
            info = _INFO[:SFS_MAX_INFO_LEN - 1]
            superblock = _SUPER.pack(SFS_MAGIC, self._ninos, self._unused_blocks, info)
            self._write_block(superblock, SFS_BLKN_SUPER)
            for block in self._blocks.values():
                self._write_block(block.data, block.ino)
            for node in self._inodes:
                self._write_block(node.pack(), node.ino)
        finally:
            self._discard()

    def _discard(self):
        self._closed = True
        self._image.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            self._discard()
        return False


def make_image(image_path, home):
    """Build a complete image at ``image_path`` from the directory ``home``."""
    with SfsBuilder(image_path) as builder:
        builder.build(home)


def main(argv=None):
    """Command line entry: ``<image.img> <dirname>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("usage: <input *.img> <input dirname>", file=sys.stderr)
        return -1
    image_path, home = args
    try:
        make_image(image_path, home)
    except SfsError as exc:
        print(f"mksfs: {exc}", file=sys.stderr)
        return -1
    print(f"create {image_path} ({home}) successfully.")
    return 0
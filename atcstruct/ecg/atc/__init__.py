'''
# ATC

Container used by handheld recorders to store one or more leads of an
electrocardiogram together with the information about the device and the
session.

After a fixed header the file is a sequence of blocks, each one made of

  .-----------------------------------------.
  | tag (4 bytes)                           |
  | length of the payload (4 bytes, LE)     |
  | payload (length bytes)                  |
  | checksum (4 bytes, LE)                  |
  '-----------------------------------------'

the checksum covers tag, length and payload. Blocks with a tag we don't
know are skipped, so newer files can be read by older readers.

All the integers are little-endian.
'''
from atcstruct.core import Chunk
from atcstruct import fields
from atcstruct.common.checksum import ChecksumField
from atcstruct.enum import BlockTag
from atcstruct.properties import Dependency, RatioDependency


ATC_MAGIC = b'ALIVE\x00\x00\x00'


class ATCHeader(Chunk):
    magic   = fields.StringField(8, default=ATC_MAGIC, is_magic=True)
    version = fields.StructField('I')


class BlockHeader(Chunk):
    tag    = fields.StructField('4s', enum=BlockTag, default=b'\x00' * 4)
    length = fields.StructField('I')


class FmtBlock(Chunk):
    '''The resolution is expressed so that 1e6 / resolution is the number of
    units per millivolt; bit 1 of the flags is set for a 60Hz mains.'''
    format     = fields.StructField('B')
    frequency  = fields.StructField('H')
    resolution = fields.StructField('H')
    flags      = fields.BitField('B')
    reserved   = fields.StructField('H')


class InfoBlock(Chunk):
    date_recorded     = fields.TextField(32)
    recording_uuid    = fields.TextField(40)
    phone_udid        = fields.TextField(44)
    phone_model       = fields.TextField(32)
    recorder_software = fields.TextField(32)
    recorder_hardware = fields.TextField(32)
    location          = fields.TextField(52)


SAMPLES_FIELD = (fields.StructArrayField, ('h',), {'n': RatioDependency(2, '.header.length')})

# the fixed records don't look at the declared length
type2field = {
    BlockTag.FMT:  (FmtBlock, (), {}),
    BlockTag.INFO: (InfoBlock, (), {}),
    BlockTag.ECG:  SAMPLES_FIELD,
    BlockTag.ECG2: SAMPLES_FIELD,
    BlockTag.ECG3: SAMPLES_FIELD,
    BlockTag.ECG4: SAMPLES_FIELD,
    BlockTag.ECG5: SAMPLES_FIELD,
    BlockTag.ECG6: SAMPLES_FIELD,
    fields.SelectField.Type.DEFAULT: (fields.SkipField, (Dependency('.header.length'),), {}),
}


class ATCBlock(Chunk):
    header   = BlockHeader()
    data     = fields.SelectField('.header.tag', type2field)
    checksum = ChecksumField(Dependency('.header.length'), verify_if=lambda block: block.is_known())

    @property
    def tag(self):
        '''A BlockTag or the raw bytes for an unknown block'''
        return self.header.tag.value

    def is_known(self):
        return isinstance(self.tag, BlockTag)


class ATCFile(Chunk):
    header = ATCHeader()
    blocks = fields.ArrayField(ATCBlock())

    def records(self):
        '''The last block for each known tag: a repeated block replaces
        the one before it.'''
        return {block.tag: block for block in self.blocks if block.is_known()}

    def get_block(self, tag):
        return self.records().get(tag)

'''
High level representation of an ATC recording: what remains once the
container has been decoded and validated.
'''
import json
import logging
from typing import NamedTuple, Optional, Tuple, List

from atcstruct.enum import BlockTag, Lead, TAG2LEAD, FmtFlag
from atcstruct.exceptions import FormatError
from atcstruct.properties import ChunkPhase
from . import ATCFile, InfoBlock


logger = logging.getLogger(__name__)

LeadSamples = Optional[Tuple[int, ...]]


class Samples(NamedTuple):
    lead_i:   LeadSamples = None
    lead_ii:  LeadSamples = None
    lead_iii: LeadSamples = None
    avr:      LeadSamples = None
    avl:      LeadSamples = None
    avf:      LeadSamples = None

    def get(self, lead: Lead) -> LeadSamples:
        return getattr(self, lead.attribute)

    def present(self) -> List[Tuple[Lead, Tuple[int, ...]]]:
        '''The leads actually recorded, in the canonical order.'''
        return [(lead, self.get(lead)) for lead in Lead if self.get(lead) is not None]

    def to_dict(self):
        return {lead.key: list(samples) for lead, samples in self.present()}


INFO_KEYS = {
    'date_recorded':     'dateRecorded',
    'recording_uuid':    'recordingUUID',
    'phone_udid':        'phoneUDID',
    'phone_model':       'phoneModel',
    'recorder_software': 'recorderSoftware',
    'recorder_hardware': 'recorderHardware',
    'location':          'location',
}


class Info(NamedTuple):
    date_recorded:     str
    recording_uuid:    str
    phone_udid:        str
    phone_model:       str
    recorder_software: str
    recorder_hardware: str
    location:          str

    @classmethod
    def from_block(cls, block: InfoBlock) -> 'Info':
        return cls(**{name: getattr(block, name).text for name in cls._fields})

    def to_dict(self):
        return {INFO_KEYS[name]: value for name, value in self._asdict().items()}


class Document(NamedTuple):
    frequency:       float
    mains_frequency: int
    gain:            float
    samples:         Samples
    info:            Optional[Info] = None

    def to_dict(self):
        result = {
            'frequency':      self.frequency,
            'mainsFrequency': self.mains_frequency,
            'gain':           self.gain,
            'samples':        self.samples.to_dict(),
        }

        if self.info is not None:
            result['info'] = self.info.to_dict()

        return result


def build_document(atc: ATCFile) -> Document:
    '''Put together the blocks of an already unpacked file.'''
    if atc.phase != ChunkPhase.DONE:
        raise ValueError(f'{atc!r} has not been unpacked')

    records = atc.records()

    fmt_block = records.get(BlockTag.FMT)
    if fmt_block is None:
        raise FormatError('missing format block', chain=[])

    fmt = fmt_block.data.field

    resolution = fmt.resolution.value
    if resolution == 0:
        raise FormatError('resolution of the format block is zero', chain=['resolution', 'data'])

    leads = {}
    for tag, lead in TAG2LEAD.items():
        if tag in records:
            leads[lead.attribute] = records[tag].data.value

    info_block = records.get(BlockTag.INFO)

    document = Document(
        frequency=float(fmt.frequency.value),
        mains_frequency=60 if fmt.flags.is_set(FmtFlag.MAINS_60HZ) else 50,
        gain=1e6 / resolution,
        samples=Samples(**leads),
        info=Info.from_block(info_block.data.field) if info_block is not None else None,
    )

    logger.debug('document with %d leads at %.1fHz' % (len(leads), document.frequency))

    return document


def parse(data) -> Document:
    '''Decode an ATC file from its content (or its path).'''
    return build_document(ATCFile(data))


def convert(data) -> str:
    '''Decode an ATC file into its JSON representation.'''
    return json.dumps(parse(data).to_dict(), separators=(',', ':'))

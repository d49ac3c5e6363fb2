from enum import Enum


class BlockTag(Enum):
    '''The block identifiers we know how to decode.

    The trailing space in some of them is part of the identifier.
    A tag outside this list is kept as the raw bytes read from the file.'''
    FMT  = b'fmt '
    INFO = b'info'
    ECG  = b'ecg '
    ECG2 = b'ecg2'
    ECG3 = b'ecg3'
    ECG4 = b'ecg4'
    ECG5 = b'ecg5'
    ECG6 = b'ecg6'


class Lead(Enum):
    '''Each value is the couple (attribute name, serialized key).'''
    I   = ('lead_i', 'leadI')
    II  = ('lead_ii', 'leadII')
    III = ('lead_iii', 'leadIII')
    AVR = ('avr', 'aVR')
    AVL = ('avl', 'aVL')
    AVF = ('avf', 'aVF')

    @property
    def attribute(self):
        return self.value[0]

    @property
    def key(self):
        return self.value[1]


TAG2LEAD = {
    BlockTag.ECG:  Lead.I,
    BlockTag.ECG2: Lead.II,
    BlockTag.ECG3: Lead.III,
    BlockTag.ECG4: Lead.AVR,
    BlockTag.ECG5: Lead.AVL,
    BlockTag.ECG6: Lead.AVF,
}


class FmtFlag(Enum):
    '''Bit positions inside the flags byte of the format block.'''
    MAINS_60HZ = 1

from typing import List, Sequence

from atcstruct.enum import BlockTag


def calc_millivolts(samples: Sequence[int], scale: float) -> List[float]:
    '''Convert raw samples into physical units dividing by the scale
    (the gain for millivolts).'''
    return [sample / scale for sample in samples]


def tag_name(tag) -> str:
    '''Printable version of a tag, known or not.'''
    raw = tag.value if isinstance(tag, BlockTag) else tag

    return raw.decode('latin1')


def get_blocks_by_tag(blocks, tag):
    return [block for block in blocks if block.tag == tag]

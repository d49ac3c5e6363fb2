'''
Command line tools:

 - atc2json: reads an ATC file from the standard input and prints it as JSON
 - atcdump: lists the blocks of an ATC file
 - atcdisplay: saves the leads of an ATC file as an image

Set the environment variable DEBUG to see what happens during the decoding.
'''
import logging
import os
import sys

from .ecg.atc import ATCFile
from .ecg.atc.document import build_document, convert
from .ecg.atc.render import render_leads
from .ecg.atc.utils import tag_name
from .enum import BlockTag
from .exceptions import ATCException


logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.WARNING)


def usage(progname, arguments):
    print(f'usage: {progname} {arguments}', file=sys.stderr)
    return 1


def atc2json(stdin=None, stdout=None):
    setup_logging()

    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout

    data = stdin.read()

    try:
        output = convert(data)
    except ATCException as e:
        logger.debug('decoding failed at \'%s\'' % e.path)
        print(e, file=sys.stderr)
        return 1

    stdout.write(output)

    return 0


def dump_block(idx, block):
    line = f'[{idx:02d}] 0x{block.offset:08x} {tag_name(block.tag)!r:8} length={block.header.length.value:<8d} checksum=0x{block.checksum.value:08x}'

    if block.tag == BlockTag.FMT:
        fmt = block.data.field
        line += f' format={fmt.format.value} frequency={fmt.frequency.value} resolution={fmt.resolution.value} flags={fmt.flags.bits.bin}'
    elif block.tag == BlockTag.INFO:
        line += f' recorded={block.data.field.date_recorded.text!r}'
    elif block.is_known():
        line += f' samples={len(block.data.value)}'
    else:
        line += ' (skipped)'

    return line


def atcdump(argv=None, stdout=None):
    setup_logging()

    argv = argv if argv is not None else sys.argv
    stdout = stdout or sys.stdout

    if len(argv) < 2:
        return usage(argv[0], '<atc file>')

    try:
        atc = ATCFile(argv[1])
    except (ATCException, OSError) as e:
        print(e, file=sys.stderr)
        return 1

    print(f'ATC version {atc.header.version.value}, {len(atc.blocks)} blocks', file=stdout)

    for idx, block in enumerate(atc.blocks):
        print(dump_block(idx, block), file=stdout)

    return 0


def atcdisplay(argv=None):
    setup_logging()

    argv = argv if argv is not None else sys.argv

    if len(argv) < 3:
        return usage(argv[0], '<atc file> <png file>')

    try:
        image = render_leads(build_document(ATCFile(argv[1])))
        image.save(argv[2], format='PNG')
    except (ATCException, ValueError, OSError) as e:
        print(e, file=sys.stderr)
        return 1

    logger.info('saved %dx%d image to \'%s\'' % (image.width, image.height, argv[2]))

    return 0

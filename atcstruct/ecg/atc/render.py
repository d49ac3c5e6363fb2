'''
Draw the leads of a recording as a strip, one row for each lead, on a
grid with a line every millivolt and every second.
'''
import logging
import math

from PIL import Image, ImageDraw

from .utils import calc_millivolts


logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)
GRID       = (255, 192, 192)
TRACE      = (0, 0, 0)


def render_leads(document, pixels_per_mv=40, pixels_per_second=100, mv_per_row=4):
    leads = document.samples.present()

    if not leads:
        raise ValueError('there are no leads to render')

    if document.frequency <= 0:
        raise ValueError('frequency of the recording is zero')

    x_step = pixels_per_second / document.frequency
    row_height = mv_per_row * pixels_per_mv
    n_samples = max(len(samples) for _, samples in leads)

    width = max(1, math.ceil(n_samples * x_step))
    height = row_height * len(leads)

    logger.debug('rendering %d leads into %dx%d pixels' % (len(leads), width, height))

    image = Image.new('RGB', (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)

    for y in range(0, height, pixels_per_mv):
        draw.line([(0, y), (width - 1, y)], fill=GRID)

    for x in range(0, width, pixels_per_second):
        draw.line([(x, 0), (x, height - 1)], fill=GRID)

    for row, (lead, samples) in enumerate(leads):
        baseline = row * row_height + row_height // 2
        points = [
            (round(idx * x_step), round(baseline - mv * pixels_per_mv))
            for idx, mv in enumerate(calc_millivolts(samples, document.gain))
        ]

        logger.debug('lead %s with %d samples at row %d' % (lead.name, len(points), row))

        if len(points) == 1:
            draw.point(points, fill=TRACE)
        elif points:
            draw.line(points, fill=TRACE)

    return image

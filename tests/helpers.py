from tape_vision.common import BoundingBox


class RecordingSink:
    def __init__(self):
        self.readings = []

    def publish(self, reading):
        self.readings.append(reading)


def box_at(center_x, center_y=540.0, width=20.0, height=40.0):
    return BoundingBox(center_x - width / 2.0, center_y - height / 2.0, width, height)

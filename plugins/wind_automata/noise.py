"""
Coherent Value Noise

Multi-octave lattice noise in the style of Processing/p5's noise(): a
table of 4096 random values is sampled at integer lattice points and
blended with a cosine ramp, four octaves at half amplitude each. Output
lies in [0, 0.9375), so always inside [0, 1), and varies smoothly for
nearby inputs.

The lookup table comes from a numpy Generator, so two CoherentNoise
instances built from the same seed produce identical fields.
"""

import math
import numpy as np


_YWRAPB = 4
_YWRAP = 1 << _YWRAPB
_ZWRAPB = 8
_ZWRAP = 1 << _ZWRAPB
_SIZE = 4095


def _scaled_cosine(t):
    return 0.5 * (1.0 - math.cos(t * math.pi))


class CoherentNoise:
    """Seedable 1D-3D coherent noise, callable as noise(x, y=0, z=0)."""

    def __init__(self, rng=None, octaves=4, falloff=0.5):
        if rng is None:
            raise ValueError("CoherentNoise requires a random generator")
        if isinstance(rng, (int, np.integer)):
            rng = np.random.default_rng(int(rng))
        self.octaves = octaves
        self.falloff = falloff
        self.table = rng.random(_SIZE + 1)

    def __call__(self, x, y=0.0, z=0.0):
        table = self.table
        x, y, z = abs(x), abs(y), abs(z)
        xi, yi, zi = int(x), int(y), int(z)
        xf, yf, zf = x - xi, y - yi, z - zi

        r = 0.0
        ampl = 0.5
        for _ in range(self.octaves):
            of = xi + (yi << _YWRAPB) + (zi << _ZWRAPB)
            rxf = _scaled_cosine(xf)
            ryf = _scaled_cosine(yf)

            n1 = table[of & _SIZE]
            n1 += rxf * (table[(of + 1) & _SIZE] - n1)
            n2 = table[(of + _YWRAP) & _SIZE]
            n2 += rxf * (table[(of + _YWRAP + 1) & _SIZE] - n2)
            n1 += ryf * (n2 - n1)

            of += _ZWRAP
            n2 = table[of & _SIZE]
            n2 += rxf * (table[(of + 1) & _SIZE] - n2)
            n3 = table[(of + _YWRAP) & _SIZE]
            n3 += rxf * (table[(of + _YWRAP + 1) & _SIZE] - n3)
            n2 += ryf * (n3 - n2)

            n1 += _scaled_cosine(zf) * (n2 - n1)

            r += n1 * ampl
            ampl *= self.falloff

            # Next octave: double frequency
            xi <<= 1
            xf *= 2
            yi <<= 1
            yf *= 2
            zi <<= 1
            zf *= 2
            if xf >= 1.0:
                xi += 1
                xf -= 1.0
            if yf >= 1.0:
                yi += 1
                yf -= 1.0
            if zf >= 1.0:
                zi += 1
                zf -= 1.0

        return float(r)

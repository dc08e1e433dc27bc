from __future__ import annotations

from api import run_viewer

SOURCE = '''
def ripple(u, v, t):
    x = (u - 0.5) * 30
    y = (v - 0.5) * 30
    r = math.hypot(x, y)
    return (x, y, 3 * math.sin(r - t / 5) / (1 + r / 5))


@render
def torus(u, v, t):
    a, b = u * 2 * math.pi, v * 2 * math.pi
    r = 6 + 2 * math.cos(b)
    return (r * math.cos(a), r * math.sin(a) + 20, 2 * math.sin(b))


render(ripple)
'''


if __name__ == "__main__":
    run_viewer(SOURCE, resolution=40)

"""
どこで: `api.examples`。
何を: ビューア/プロッタ起動時にエディタへ入れておくサンプルプログラム（Python ソース文字列）。
なぜ: 初回起動でも自動コンパイル結果がすぐ見え、登録コールバックの書き方を示せるようにするため。
"""

EXAMPLE_SOURCE = '''\
# parametric function renderer
# u and v are parameters from 0 to 1
# use t for animations, t is incremented every frame
#
# drag to orbit the camera, scroll to zoom

def torus(u, v, t):
    r = 2 * (2 + math.cos(t / 10))
    return (
        15 + math.cos(u * math.pi * 2) * (r + 2 * math.cos(v * math.pi * 2)),
        math.sin(u * math.pi * 2) * (r + 2 * math.cos(v * math.pi * 2)),
        2 * math.sin(v * math.pi * 2),
    )


def klein(u, v, t=0):
    U = u * 2 * math.pi
    V = v * 2 * math.pi
    y = -2 * (1 - math.cos(U) / 2) * math.sin(V)
    if U < math.pi:
        x = 3 * math.cos(U) * (1 + math.sin(U)) + (2 * (1 - math.cos(U) / 2)) * math.cos(U) * math.cos(V)
        z = -8 * math.sin(U) - 2 * (1 - math.cos(U) / 2) * math.sin(U) * math.cos(V)
    else:
        x = 3 * math.cos(U) * (1 + math.sin(U)) + (2 * (1 - math.cos(U) / 2)) * math.cos(V + math.pi)
        z = -8 * math.sin(U)
    return (x, y, z)


render(torus)
render(klein)
'''

CURVE_EXAMPLE_SOURCE = '''\
# curve plotter
# y = f(x, t) is sampled once per plot unit across the visible range
# drag to pan, scroll to zoom at the cursor

def wave(x, t):
    return math.sin(x / 40 + t) * 100


@render(kind="parametric_curve")
def rose(s, t):
    a = s * 2 * math.pi
    r = 200 * math.cos(4 * a + t / 5)
    return (r * math.cos(a), r * math.sin(a))


render(wave)
'''

__all__ = ["EXAMPLE_SOURCE", "CURVE_EXAMPLE_SOURCE"]

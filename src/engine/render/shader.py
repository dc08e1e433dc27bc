"""
どこで: `engine.render.shader`。
何を: 曲面（ランバート陰影 + ワイヤフレーム用の無陰影）と 2D 線分用の GLSL プログラム生成。
なぜ: シェーダソースとユニフォーム名を 1 箇所に固め、レンダラ側はユニフォームの書き込みだけに集中するため。
"""

from __future__ import annotations

from typing import Any

MESH_VERTEX_SHADER = """
#version 330
uniform mat4 mvp;
in vec3 in_vert;
in vec3 in_normal;
out vec3 v_normal;
void main() {
    v_normal = in_normal;
    gl_Position = mvp * vec4(in_vert, 1.0);
}
"""

MESH_FRAGMENT_SHADER = """
#version 330
uniform vec4 color;
uniform vec3 light_dir;
uniform float shaded;
in vec3 v_normal;
out vec4 f_color;
void main() {
    // 両面ライティング（裏面も同じ明るさ）
    float lambert = abs(dot(normalize(v_normal), normalize(light_dir)));
    float k = mix(1.0, 0.35 + 0.65 * lambert, shaded);
    f_color = vec4(color.rgb * k, color.a);
}
"""

LINE_VERTEX_SHADER = """
#version 330
uniform mat4 projection;
in vec2 in_vert;
void main() {
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
}
"""

LINE_FRAGMENT_SHADER = """
#version 330
uniform vec4 color;
out vec4 f_color;
void main() {
    f_color = color;
}
"""


class Shader:
    @staticmethod
    def create_mesh_program(ctx: Any) -> Any:
        """`mvp` / `color` / `light_dir` / `shaded` を持つ曲面用プログラム。"""
        program = ctx.program(
            vertex_shader=MESH_VERTEX_SHADER, fragment_shader=MESH_FRAGMENT_SHADER
        )
        program["light_dir"].value = (0.4, 0.8, 0.6)
        program["shaded"].value = 1.0
        return program

    @staticmethod
    def create_line_program(ctx: Any) -> Any:
        """`projection` / `color` を持つ 2D 線分用プログラム。"""
        return ctx.program(vertex_shader=LINE_VERTEX_SHADER, fragment_shader=LINE_FRAGMENT_SHADER)


__all__ = ["Shader"]

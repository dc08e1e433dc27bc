"""
どこで: `engine.core` サブパッケージ。
何を: Mesh/Polyline とサンプル結果、アニメーション時計、ビューポート変換、フレーム駆動と描画ウィンドウ。
なぜ: 計算と描画の基盤を構成し、上位層（sampling/runtime/scene/render）から再利用可能にするため。
"""

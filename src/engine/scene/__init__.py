"""
どこで: `engine.scene` サブパッケージ。
何を: エディタ入力・描画設定・コンポーザ（3D: SceneComposer / 2D: PlotComposer）。
なぜ: サンドボックスとプリミティブ群をまとめ、レンダラへ渡す描画単位を組み立てるため。
"""

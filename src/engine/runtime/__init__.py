"""
どこで: `engine.runtime` サブパッケージ。
何を: pyglet 時計ベースの `TickScheduler` と、関数ごとにジオメトリを作り直す `Primitive` 群。
なぜ: 生成（サンプリング）の周期を描画ループと同じスレッドで協調的に回し、ロックなしで一貫性を保つため。
"""

"""
どこで: `engine.render` サブパッケージ。
何を: Mesh/Polyline → GPU 転送・描画の入口。MeshRenderer/PolylineRenderer/GpuMesh/Shader/OrbitCamera を提供。
なぜ: 計算（sampling/scene）と描画の責務を分離し、GPU リソース管理を局所化するため。
"""

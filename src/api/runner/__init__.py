"""
どこで: `api.runner`。
何を: ランナー（viewer/plotter）共通の小ヘルパ群。
"""

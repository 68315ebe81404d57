"""ベースパスを生成する primitive 群。"""

"""ベースパスを変形する effect 群。"""

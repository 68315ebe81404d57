"""シーンのファイル出力。"""

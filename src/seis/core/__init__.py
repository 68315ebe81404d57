"""パラメータ・幾何・ノイズ整形など、GUI に依存しない中核処理。"""

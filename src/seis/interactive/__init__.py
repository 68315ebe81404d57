"""pyglet + pyimgui による対話シェル（optional extra `interactive`）。"""

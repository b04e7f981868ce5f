"""scenereel - assemble generated scene clips into one narrated video.

Join independently generated clips with uniform xfade transitions (falling
back to a stream-copy concat), layer music and ambience beds, and turn
still images into pan/zoom clips when animation is unavailable.
"""

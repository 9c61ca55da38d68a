"""
Debate Response Pipeline Module

This module orchestrates the pipeline that:
1. Fetches the source video and extracts a mono 16 kHz audio track
2. Transcribes the audio
3. Generates a rebuttal with a hosted language model
4. Synthesizes narration for the rebuttal
5. Renders the rebuttal as a timed caption video
6. Muxes captions and narration, publishes the result and notifies the requester
"""

__version__ = "1.0.0"

# mixkit

Building blocks for mixing audio in pure Python, with no dependencies outside
the standard library.

mixkit works on streams of float samples in the range -1.0 to 1.0.

## What is in it

- `mixkit.bip.BipBuffer`: the bookkeeping of a bipartite ring buffer. A writer
  reserves space with `request_write` and commits it with `finish_write`; a
  reader takes what was written with `request_read` and `finish_read`.
  `available_read` and `available_write` report how much the next request
  can return.
- `mixkit.buffer.Buffer`: a `BipBuffer` of 32-bit float samples. Its requests
  return `memoryview`s into the sample array. `write(samples)` appends as many
  samples as fit and returns the count; `read(size)` consumes and returns up to
  `size` samples (all of them when `size` is `None`); `resize` changes the
  capacity. `mixkit.buffer.transfer` moves readable samples from one buffer to
  another, `mixkit.buffer.copy` copies them without consuming them.
- `mixkit.pack.Pack`: a `BipBuffer` of raw bytes sized for a number of frames of
  interleaved, encoded samples (`Pack(frames, channels, encoding)`).
- `mixkit.encoding`: conversion between normalised floats and sample
  encodings: `from_int8` ... `from_uint32`, `from_float`, `from_double` and
  their `to_*` counterparts. `decoder(encoding)` and `encoder(encoding)` look
  the right function up for a `mixkit.common.Encoding`.
- `mixkit.common`: the `ErrorCode`, `Encoding` and `FieldType` enumerations,
  `samplesize`, `error_string`, `type_string`, `version`, and a position-based
  hash random generator (`HashRandom`, `random_int`, `random_float`).
- `mixkit.hilbert.hilbert`: a 200-tap FIR approximation of the Hilbert
  transform over a caller-supplied delay line.
- `mixkit.biquad`: the filter designs `lowpass`, `highpass`, `bandpass`, `notch`,
  `peaking`, `allpass`, `lowshelf` and `highshelf`, each returning a
  `BiquadState`. A state filters one value with `sample` or a whole buffer with
  `process(source, target)`.
- Segments, the units of a mixing graph, all subclasses of
  `mixkit.segment.Segment`. They are configured through `set_in`, `set_out`,
  `get` and `set` with a `mixkit.segment.Field`, and describe themselves with
  `info()`, which returns a `SegmentInfo` listing `FieldInfo`s.
  - `mixkit.basic_mixer.BasicMixer`: sums interleaved inputs into each output
    channel; volume changes take effect at the next zero crossing.
  - `mixkit.biquad_filter.BiquadFilter`: a frequency filter of a given
    `FilterType`, easing its coefficients towards new settings after each mix.
  - `mixkit.chain.Chain`: runs several segments in order.
  - `mixkit.channel.ChannelConvert`: converts between channel layouts: equal
    counts, mono to stereo, and stereo to mono, 3.0, 4.0, 5.0, 5.1 and 7.1.
  - `mixkit.compressor.Compressor`: a dynamic range compressor with soft knee and
    adaptive release.
- `mixkit.registry`: segment factories by name. Each segment module registers
  itself when imported (`basic_mixer`, `biquad_filter`, `chain`,
  `channel_convert`, `compressor`); `list_segments`, `segment_arguments` and
  `make_segment(name, *args)` work on what has been registered.

Errors that the library reports raise `mixkit.common.MixedError`, whose `code`
is a `mixkit.common.ErrorCode`; bad argument ranges (a negative size, a
sample out of its encoding's range) raise `ValueError`.

## Installing

```
pip install .
```

## Example

Filter a block of samples through a low-pass filter:

```python
from mixkit.buffer import Buffer
from mixkit.biquad_filter import BiquadFilter, FilterType
from mixkit.segment import Field

source = Buffer(512)
target = Buffer(512)

segment = BiquadFilter(FilterType.LOWPASS, 1000.0, 44100)
segment.set_in(Field.BUFFER, 0, source)
segment.set_out(Field.BUFFER, 0, target)
segment.start()

source.write([0.5, -0.5] * 128)
segment.mix()
filtered = target.read(256)
segment.end()
```

Building a segment by name:

```python
import mixkit.compressor
from mixkit.registry import make_segment

compressor = make_segment("compressor", 44100)
```

## What it does not do

mixkit only processes samples held in memory. It does not play or record
audio, read or write audio files, resample, or load segments from shared
libraries: the registry holds only factories registered from Python. There is
no command-line program.

## Running the tests

```
pip install .[test]
pytest
```
# ringtag

Building blocks for working with fiducial markers made of concentric rings:
edge-point bookkeeping, a discrete walk along the image gradient, ellipse and
circle fitting, identification of ring radius ratios against a bank of known
codes, a generator of noisy frames for test sequences, and a checker that
compares detection logs between runs.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `ringtag.status` — `Status`, an `IntEnum` of marker outcomes. Only
  `Status.ID_RELIABLE` (1) marks an identified marker; `NO_COLLECTED_CUTS`
  is an alias of `TOO_FEW_OUTER_POINTS` (-1). `default_radius_ratios()`
  returns the five initial ring radius ratios (29/9, 29/13, 29/17, 29/21,
  29/25) and `default_circle_count()` returns 6.
- `ringtag.edgepoint` — `EdgePoint`, an edge pixel with its gradient
  (`dx`, `dy`, `gradient`, `norm_gradient`) and bookkeeping fields
  (`flow_length`, `processed`, `is_max`, `n_segment_out`); `copy()` keeps
  position and gradient and resets the bookkeeping. `EdgeMap` holds the edge
  points of a `width` x `height` image: `add_point`, `get` (None for an empty
  pixel, `IndexError` outside the map), `in_bounds`, iteration and `len()`.
  `edge_points_from_canny(edges, dx, dy)` turns every pixel equal to 255 in
  an edge image into an edge point, taking the gradient from the two
  derivative images. `received_more_vote_than(p1, p2)` compares `is_max`.
- `ringtag.bresenham` — `gradient_direction_descent(canny, p, direction,
  nmax, img_dx, img_dy, thr_gradient)` walks from `p` along (`direction=1`)
  or against (`direction=-1`) its gradient and returns the first edge point
  met, or None when the walk leaves the map or exceeds `nmax` steps.
- `ringtag.fitting` — `fit_ellipse(points)` is a direct least-squares
  ellipse fit over at least five points; `circle_fitting(points)` fits a
  circle over at least three. Points may be edge points or `(x, y)` pairs;
  both return a frozen `FittedEllipse(center, a, b, angle)` and raise
  `ValueError` for degenerate input. `inner_prod_min(points,
  thr_cos_diff_max)` measures how far the gradient directions of edge points
  spread and returns `(min_inner_product, p1, p2)`.
- `ringtag.markers_bank` — `MarkersBank(3)` and `MarkersBank(4)` hold the
  built-in codes (32 and 128 of them); any other count gives an empty bank.
  `MarkersBank.from_file(path)` builds a bank from a text file and `read`
  appends the codes of a file to an existing bank. Each line holds decimal
  numbers or fractions such as `29/9`, parsed by `parse_bank_line`.
  `identify(ratios)` returns the 1-based index of the nearest code by
  Euclidean distance and raises `IdentificationError` when it is farther
  than 0.6. `markers` returns a copy of the codes.
- `ringtag.simulation` — `generate_compressed_frame(src, rng)` returns a
  degraded copy of a grey-scale image: a 5x5 median filter, one Gaussian
  noise value per 3x3 block and one per pixel, clamped to 0..255.
- `ringtag.regression` — `DetectedTag`, `FrameLog` and `FileLog` hold
  detection results; `FileLog.save(path)` writes XML and `FileLog.load(path)`
  reads it back. `is_supported_image`, `is_supported_video` and
  `is_supported_format` check file names (`.png`, `.jpg`, `.avi`, any case).
  `sort_tags` drops tags with status below 1 and sorts the rest by id;
  `collect_files` lists the regular files of a directory.
  `RegressionChecker(reference_dir, test_dir, epsilon=0.5)` pairs test logs
  with reference logs by file name. `check()` returns True when every test
  log agrees, logging each failure; `check_file` and the `compare_*` methods
  raise `CheckError` on the first mismatch. The mean and population standard
  deviation of elapsed-time and quality differences are available afterwards.

## Example

```python
from ringtag.markers_bank import MarkersBank, IdentificationError

bank = MarkersBank(3)
try:
    marker_id = bank.identify([2.0, 1.666667, 1.428571, 1.25, 1.111111])
except IdentificationError:
    marker_id = None
print(marker_id)  # 1
```

## Generating noisy frames

`ringtag-simulate` reads an image, converts it to grey, and writes degraded
frames named `00000.png`, `00001.png`, ... into an existing directory:

```
ringtag-simulate input.png frames/ --frames 100 --seed 0
```

`--frames` defaults to 100 and `--seed` to 0.

## What the package does not do

There is no complete detector: nothing here finds markers in an image from
start to finish (no image pyramid, Canny stage, voting, ellipse growing or
ring-cut identification), and there is no command for detection. The
regression tools therefore compare logs that already exist; they cannot
produce new logs by running a detection over images or videos.
import sys

from audio_normalizer.main import main

sys.exit(main())

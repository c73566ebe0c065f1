import sys

from video_summarizer.main import main

sys.exit(main())

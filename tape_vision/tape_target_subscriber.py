import sys

import rclpy
from rclpy.logging import get_logger
from rclpy.node import Node
from rclpy.utilities import remove_ros_args
from sensor_msgs.msg import Image, CompressedImage
from std_msgs.msg import Float64MultiArray
from cv_bridge import CvBridge
import cv2
import numpy as np

from tape_vision.utils import (
    TapeDetector,
    CalibrationConstants,
    ConfigError,
    EveryNFrames,
    format_tape,
    has_undefined_distance,
    measurement_arrays,
    read_config,
)
from tape_vision.utils.config_utils import config_file_from_argv

MEASUREMENT_FIELDS = ("xOffset", "distance", "angle")


class TapeTargetSubscriber(Node):
    def __init__(self, config):
        super().__init__("tape_target_subscriber")

        self.br = CvBridge()

        # -------- Publisher Configuration --------
        publisher_cfg = config["publisher"]
        self.table = publisher_cfg["table"]
        self.compressed = publisher_cfg["compressed"]
        self.log_every_n_frames = publisher_cfg["log_every_n_frames"]
        self.show_debug_window = publisher_cfg["show_debug_window"]

        # -------- Detection Configuration --------
        pipeline_cfg = dict(config["pipeline"])
        pipeline_cfg.setdefault("draw_detections", self.show_debug_window)
        calibration = CalibrationConstants.from_config(config["calibration"])

        self.tape_detector = TapeDetector(pipeline_cfg, calibration, self.get_logger())

        if calibration.legacy_fov_units:
            self.get_logger().warning("Using legacy FOV units (degrees passed to tan)")

        # Depth 1: a frame arriving while one is processed replaces the queued one
        self.subscription = self.create_subscription(
            CompressedImage if self.compressed else Image,
            publisher_cfg["image_topic"],
            self.listener_callback,
            1,
        )

        self.target_pubs = {
            field: self.create_publisher(Float64MultiArray, f"{self.table}/{field}", 10)
            for field in MEASUREMENT_FIELDS
        }

        self.log_cadence = EveryNFrames(self.log_every_n_frames)

        self.get_logger().info(
            f"Tape target subscriber on {publisher_cfg['image_topic']} -> {self.table}/*"
        )

    def listener_callback(self, data):
        """Process incoming camera frames and publish tape target measurements."""
        if self.compressed:
            np_arr = np.frombuffer(data.data, np.uint8)
            frame = cv2.imdecode(np_arr, cv2.IMREAD_COLOR)
        else:
            frame = self.br.imgmsg_to_cv2(data, desired_encoding="bgr8")

        if frame is None:
            self.get_logger().warning("Image decode failed")
            return

        try:
            result, detection = self.tape_detector.detect(frame)
        except cv2.error as e:
            self.get_logger().error(f"Pipeline failed, frame dropped: {e}")
            return

        self._log_tapes(detection.tapes)
        self.publish_measurements(detection.measurements)

        if self.show_debug_window:
            cv2.imshow("Tape Targets", result)
            cv2.waitKey(1)

    def _log_tapes(self, tapes):
        """Log the fitted tapes every log_every_n_frames frames."""
        if not self.log_cadence.tick():
            return

        for tape in tapes:
            self.get_logger().info(format_tape(tape))

    def publish_measurements(self, measurements):
        """Publish offsets, distances and angles as index-aligned arrays."""
        if has_undefined_distance(measurements):
            self.get_logger().warning(
                "Target on optical axis, distance published as NaN",
                throttle_duration_sec=1.0,
            )

        arrays = measurement_arrays(measurements)
        for field, publisher in self.target_pubs.items():
            msg = Float64MultiArray()
            msg.data = arrays[field].tolist()
            publisher.publish(msg)


def main(args=None):
    rclpy.init(args=args)
    argv = remove_ros_args(args=args if args is not None else sys.argv)
    config_file = config_file_from_argv(argv)

    try:
        config = read_config(config_file)
    except ConfigError as e:
        get_logger("tape_target_subscriber").error(str(e))
        rclpy.shutdown()
        return

    node = TapeTargetSubscriber(config)
    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        node.destroy_node()
        rclpy.shutdown()


if __name__ == "__main__":
    main()
